from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from ordertally.db_models import OrderRow, price_from_cents
from ordertally.order import Order


class OrderStore:
    """Accepted orders for the current session, kept in insertion order.

    Filters passed to the query helpers are SQLAlchemy criteria over
    ``OrderRow`` columns, e.g. ``OrderRow.client_id == "AB"``.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def insert(self, order: Order) -> None:
        self.insert_many([order])

    def insert_many(self, orders: Iterable[Order]) -> None:
        with self.session_factory() as db:
            db.add_all(OrderRow.from_order(order) for order in orders)
            db.commit()

    def clear(self) -> None:
        # SQLite hands out max(id) + 1, so an empty table restarts ids at 1.
        with self.session_factory() as db:
            db.execute(delete(OrderRow))
            db.commit()

    def all(self) -> list[Order]:
        return self.query()

    def query(self, *criteria: ColumnElement[bool]) -> list[Order]:
        stmt = select(OrderRow).where(*criteria).order_by(OrderRow.id)
        with self.session_factory() as db:
            return [row.to_order() for row in db.execute(stmt).scalars()]

    def distinct_client_ids(self) -> list[str]:
        stmt = select(OrderRow.client_id).distinct().order_by(OrderRow.client_id)
        with self.session_factory() as db:
            return list(db.execute(stmt).scalars())

    def count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count(OrderRow.id)).where(*criteria)
        with self.session_factory() as db:
            return db.execute(stmt).scalar_one()

    def total_price(self, *criteria: ColumnElement[bool]) -> Decimal:
        stmt = select(func.coalesce(func.sum(OrderRow.price_cents), 0)).where(*criteria)
        with self.session_factory() as db:
            return price_from_cents(db.execute(stmt).scalar_one())
