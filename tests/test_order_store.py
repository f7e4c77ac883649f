from decimal import Decimal

from ordertally.database import build_session_factory
from ordertally.db_models import OrderRow
from ordertally.order_store import OrderStore

from conftest import make_order


def test_insert_keeps_duplicates_in_order(store: OrderStore) -> None:
    first = make_order("AB", 1, "Widget", 2, "10.00")
    store.insert(first)
    store.insert(make_order("CD", 2, "Gadget", 1, "5.50"))
    store.insert(first)

    assert [order.request_id for order in store.all()] == [1, 2, 1]
    assert store.all()[0] == store.all()[2]


def test_prices_come_back_exact(store: OrderStore) -> None:
    store.insert(make_order("AB", 1, "Widget", 2, "9999999999.99"))
    store.insert(make_order("AB", 2, "Widget", 2, "0.01"))

    assert [str(order.price) for order in store.all()] == ["9999999999.99", "0.01"]
    assert store.total_price() == Decimal("10000000000.00")


def test_distinct_client_ids_are_sorted(store: OrderStore) -> None:
    store.insert_many(
        [
            make_order("CD", 1, "Gadget", 1, "1.00"),
            make_order("AB", 2, "Widget", 1, "1.00"),
            make_order("CD", 3, "Gadget", 1, "1.00"),
            make_order("Ab", 4, "Widget", 1, "1.00"),
        ]
    )

    assert store.distinct_client_ids() == ["AB", "Ab", "CD"]


def test_query_filters_by_criteria(store: OrderStore) -> None:
    store.insert_many(
        [
            make_order("AB", 1, "Widget", 2, "10.00"),
            make_order("CD", 2, "Gadget", 1, "5.50"),
            make_order("AB", 3, "Sprocket", 4, "5.25"),
        ]
    )

    assert [order.request_id for order in store.query(OrderRow.client_id == "AB")] == [1, 3]
    assert store.count(OrderRow.quantity > 1) == 2
    assert store.total_price(OrderRow.client_id == "CD") == Decimal("5.50")


def test_clear_empties_everything(store: OrderStore) -> None:
    store.insert(make_order("AB", 1, "Widget", 2, "10.00"))

    store.clear()

    assert store.all() == []
    assert store.distinct_client_ids() == []
    assert store.count() == 0


def test_in_memory_store_is_shared_between_sessions() -> None:
    store = OrderStore(build_session_factory("sqlite://"))
    store.insert(make_order("AB", 1, "Widget", 2, "10.00"))

    assert store.count() == 1
