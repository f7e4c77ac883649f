from decimal import Decimal
from pathlib import Path

import pytest

from ordertally.config import Settings
from ordertally.database import build_session_factory
from ordertally.ingestion import IngestionPipeline
from ordertally.order import Order
from ordertally.order_store import OrderStore


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "data").mkdir(parents=True, exist_ok=True)
    (tmp_path / "reports").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        app_name="ordertally",
        database_url=f"sqlite:///{temp_workspace / 'test.db'}",
        log_level="INFO",
        export_dir=str(temp_workspace / "reports"),
    )


@pytest.fixture()
def store(test_settings: Settings) -> OrderStore:
    return OrderStore(build_session_factory(test_settings.database_url))


@pytest.fixture()
def pipeline(store: OrderStore) -> IngestionPipeline:
    return IngestionPipeline(store)


def make_order(client_id: str, request_id: int, name: str, quantity: int, price: str) -> Order:
    return Order(client_id=client_id, request_id=request_id, name=name, quantity=quantity, price=Decimal(price))
