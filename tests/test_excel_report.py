from openpyxl import load_workbook

from provider_recon.config import ReconConfig
from provider_recon.pipeline import reconcile_texts
from provider_recon.reports.excel_generator import ExcelReportGenerator


def test_generate_report(internal_csv, provider_csv, tmp_path):
    run = reconcile_texts(internal_csv, provider_csv)
    output = tmp_path / "reports" / "recon.xlsx"

    path = ExcelReportGenerator().generate_report(run.summary, run.result, output)

    assert path == output
    wb = load_workbook(output)
    assert wb.sheetnames == [
        "Summary",
        "Matched Transactions",
        "Mismatches",
        "Internal Only",
        "Provider Only",
    ]

    matched = wb["Matched Transactions"]
    assert matched.max_row == 4
    assert matched["A2"].value == "TX1"
    assert matched["F3"].value == "Amount: Internal 250.5 vs Provider 250"

    mismatches = wb["Mismatches"]
    assert [mismatches.cell(row=r, column=1).value for r in (2, 3)] == ["TX2", "TX3"]

    internal_only = wb["Internal Only"]
    assert [c.value for c in internal_only[1]] == [
        "Reference",
        "Amount",
        "Status",
        "Date",
        "Description",
        "channel",
    ]
    assert internal_only["A2"].value == "TX4"
    assert internal_only["B2"].value == 10.0

    summary = wb["Summary"]
    assert summary["B19"].value == "60.0%"


def test_disabled_sheets_are_omitted(internal_csv, provider_csv, tmp_path):
    config = ReconConfig(
        output={"sheets": {"mismatches": {"enabled": False, "name": "Mismatches"}}}
    )
    run = reconcile_texts(internal_csv, provider_csv, config)
    output = tmp_path / "recon.xlsx"

    ExcelReportGenerator(config).generate_report(run.summary, run.result, output)

    assert "Mismatches" not in load_workbook(output).sheetnames


def test_cell_text_is_written_as_plain_data(tmp_path):
    internal = "Reference,Amount,Description\n=1+1,5,bad\x01char\nTX2,6,=SUM(A1:A9)"
    provider = "Reference,Amount\nTX2,6"
    run = reconcile_texts(internal, provider)
    output = tmp_path / "recon.xlsx"

    ExcelReportGenerator().generate_report(run.summary, run.result, output)

    internal_only = load_workbook(output)["Internal Only"]
    assert internal_only["A2"].value == "=1+1"
    assert internal_only["A2"].data_type == "s"
    assert internal_only["E2"].value == "badchar"
