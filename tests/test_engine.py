from decimal import Decimal

import pytest

from provider_recon.config import ReconConfig
from provider_recon.matching.engine import ReconciliationEngine, reconcile_transactions
from provider_recon.parsers.csv_parser import parse_csv


def test_end_to_end_scenario(make_txn):
    internal = [make_txn("TX1", "50", "Success")]
    provider = [make_txn("TX1", "50", "Success"), make_txn("TX2", "10", "Pending")]

    result = reconcile_transactions(internal, provider)

    assert len(result.matched) == 1
    assert result.matched[0].internal is internal[0]
    assert result.matched[0].provider is provider[0]
    assert result.matched[0].mismatches == []
    assert result.internal_only == []
    assert result.provider_only == [provider[1]]
    assert result.provider_only[0] is provider[1]


def test_disjoint_references(make_txn):
    internal = [make_txn("A"), make_txn("B"), make_txn("C")]
    provider = [make_txn("Z"), make_txn("Y")]

    result = reconcile_transactions(internal, provider)

    assert result.matched == []
    assert result.internal_only == internal
    assert result.provider_only == provider


def test_identical_single_record_is_clean_match(make_txn):
    result = reconcile_transactions(
        [make_txn("TX1", "12.34", "Paid")], [make_txn("TX1", "12.34", "Paid")]
    )

    assert len(result.matched) == 1
    assert not result.matched[0].has_mismatches


def test_empty_inputs(make_txn):
    result = reconcile_transactions([], [])

    assert result.matched == []
    assert result.internal_only == []
    assert result.provider_only == []


class TestAmountComparison:
    @pytest.mark.parametrize("provider_amount", ["100.00", "100.01", "99.99", "100.005"])
    def test_within_tolerance(self, make_txn, provider_amount):
        result = reconcile_transactions(
            [make_txn("TX1", "100.00")], [make_txn("TX1", provider_amount)]
        )

        assert result.matched[0].mismatches == []

    def test_beyond_tolerance(self, make_txn):
        result = reconcile_transactions(
            [make_txn("TX1", "100.00")], [make_txn("TX1", "100.015")]
        )

        assert result.matched[0].mismatches == [
            "Amount: Internal 100 vs Provider 100.015"
        ]

    def test_message_reports_both_values(self, make_txn):
        result = reconcile_transactions(
            [make_txn("TX1", "250.50")], [make_txn("TX1", "-250.50")]
        )

        assert result.matched[0].mismatches == [
            "Amount: Internal 250.5 vs Provider -250.5"
        ]

    def test_configured_tolerance(self, make_txn):
        config = ReconConfig(matching={"amount_tolerance": 1.0})
        engine = ReconciliationEngine(config)

        result = engine.reconcile([make_txn("TX1", "10.00")], [make_txn("TX1", "10.90")])

        assert result.matched[0].mismatches == []


class TestStatusComparison:
    def test_case_insensitive_by_default(self, make_txn):
        result = reconcile_transactions(
            [make_txn("TX1", status="Completed")], [make_txn("TX1", status="completed")]
        )

        assert result.matched[0].mismatches == []

    def test_message_keeps_original_case(self, make_txn):
        result = reconcile_transactions(
            [make_txn("TX1", status="Completed")], [make_txn("TX1", status="FAILED")]
        )

        assert result.matched[0].mismatches == [
            'Status: Internal "Completed" vs Provider "FAILED"'
        ]

    def test_case_sensitive_option(self, make_txn):
        config = ReconConfig(matching={"status_case_sensitive": True})

        result = ReconciliationEngine(config).reconcile(
            [make_txn("TX1", status="Completed")], [make_txn("TX1", status="completed")]
        )

        assert result.matched[0].mismatches == [
            'Status: Internal "Completed" vs Provider "completed"'
        ]

    def test_amount_and_status_both_reported(self, make_txn):
        result = reconcile_transactions(
            [make_txn("TX1", "5", "Paid")], [make_txn("TX1", "6", "Void")]
        )

        mismatches = result.matched[0].mismatches
        assert len(mismatches) == 2
        assert mismatches[0].startswith("Amount:")
        assert mismatches[1].startswith("Status:")


class TestDuplicateReferences:
    def test_every_internal_duplicate_pairs_with_last_provider_record(self, make_txn):
        internal = [make_txn("TX1", "1"), make_txn("TX1", "2")]
        provider = [make_txn("TX1", "1"), make_txn("TX1", "2")]

        result = reconcile_transactions(internal, provider)

        assert len(result.matched) == 2
        assert [m.internal for m in result.matched] == internal
        assert all(m.provider is provider[1] for m in result.matched)
        assert result.matched[0].mismatches == ["Amount: Internal 1 vs Provider 2"]
        assert result.matched[1].mismatches == []
        assert result.provider_only == []

    def test_unmatched_duplicates_are_all_listed(self, make_txn):
        internal = [make_txn("A"), make_txn("A")]
        provider = [make_txn("B"), make_txn("B")]

        result = reconcile_transactions(internal, provider)

        assert result.internal_only == internal
        assert result.provider_only == provider


def test_order_is_preserved(make_txn):
    internal = [make_txn(ref) for ref in ["D", "A", "X", "B"]]
    provider = [make_txn(ref) for ref in ["Q", "B", "P", "D"]]

    result = reconcile_transactions(internal, provider)

    assert [m.internal.reference for m in result.matched] == ["D", "B"]
    assert [t.reference for t in result.internal_only] == ["A", "X"]
    assert [t.reference for t in result.provider_only] == ["Q", "P"]


def test_every_record_lands_in_one_group(internal_csv, provider_csv):
    internal = parse_csv(internal_csv)
    provider = parse_csv(provider_csv)

    result = reconcile_transactions(internal, provider)

    internal_ids = [id(m.internal) for m in result.matched] + [
        id(t) for t in result.internal_only
    ]
    assert sorted(internal_ids) == sorted(id(t) for t in internal)
    provider_refs = {m.provider.reference for m in result.matched} | {
        t.reference for t in result.provider_only
    }
    assert provider_refs == {t.reference for t in provider}


def test_sample_files(internal_csv, provider_csv):
    result = reconcile_transactions(parse_csv(internal_csv), parse_csv(provider_csv))

    by_ref = {m.internal.reference: m.mismatches for m in result.matched}
    assert by_ref == {
        "TX1": [],
        "TX2": ["Amount: Internal 250.5 vs Provider 250"],
        "TX3": ['Status: Internal "Completed" vs Provider "Refunded"'],
    }
    assert [t.reference for t in result.internal_only] == ["TX4"]
    assert [t.reference for t in result.provider_only] == ["TX9"]
    assert [m.internal.reference for m in result.mismatched] == ["TX2", "TX3"]


def test_reconcile_is_idempotent(internal_csv, provider_csv):
    internal = parse_csv(internal_csv)
    provider = parse_csv(provider_csv)
    engine = ReconciliationEngine()

    assert engine.reconcile(internal, provider) == engine.reconcile(internal, provider)


def test_inputs_are_not_modified(make_txn):
    internal = [make_txn("TX1", "1", "a")]
    provider = [make_txn("TX1", "2", "b")]

    reconcile_transactions(internal, provider)

    assert internal == [make_txn("TX1", "1", "a")]
    assert provider == [make_txn("TX1", "2", "b")]


def test_generate_summary(internal_csv, provider_csv):
    internal = parse_csv(internal_csv)
    provider = parse_csv(provider_csv)
    engine = ReconciliationEngine()
    result = engine.reconcile(internal, provider)

    summary = engine.generate_summary(
        internal, provider, result, "internal.csv", "provider.csv", 0.5
    )

    assert summary.total_internal_transactions == 4
    assert summary.total_provider_transactions == 4
    assert summary.matched_count == 3
    assert summary.mismatched_count == 2
    assert summary.internal_only_count == 1
    assert summary.provider_only_count == 1
    assert summary.total_transactions == 5
    assert summary.unmatched_count == 2
    assert summary.match_rate == pytest.approx(60.0)
    assert summary.config_file_used is None


def test_amount_values_are_decimal(make_txn):
    result = reconcile_transactions([make_txn("TX1", "0.1")], [make_txn("TX1", "0.1")])

    assert isinstance(result.matched[0].internal.amount, Decimal)
