from decimal import Decimal
from pathlib import Path

import pytest

from provider_recon.config import ReconConfig
from provider_recon.models.transaction import Transaction

INTERNAL_CSV = """transaction_reference,amount,status,date,description,channel
TX1,$1000.00,Completed,2024-01-01,Order 1,web
TX2,250.50,Pending,2024-01-02,Order 2,app
TX3,75.00,Completed,2024-01-03,Order 3,web
TX4,10.00,Failed,2024-01-04,Order 4,app
"""

PROVIDER_CSV = """Reference,Amount,Status,Settlement Date
TX1,1000.00,completed,2024-01-02
TX2,250.00,Pending,2024-01-03
TX3,75.00,Refunded,2024-01-04
TX9,5.00,Completed,2024-01-05
"""


@pytest.fixture
def config() -> ReconConfig:
    return ReconConfig()


@pytest.fixture
def internal_csv() -> str:
    return INTERNAL_CSV


@pytest.fixture
def provider_csv() -> str:
    return PROVIDER_CSV


@pytest.fixture
def csv_files(tmp_path: Path) -> tuple[Path, Path]:
    internal = tmp_path / "internal.csv"
    provider = tmp_path / "provider.csv"
    internal.write_text(INTERNAL_CSV, encoding="utf-8")
    provider.write_text(PROVIDER_CSV, encoding="utf-8")
    return internal, provider


@pytest.fixture
def make_txn():
    def _make(reference: str, amount: str = "0", status: str = "", **extra) -> Transaction:
        return Transaction(
            reference=reference, amount=Decimal(amount), status=status, extra=extra
        )

    return _make
