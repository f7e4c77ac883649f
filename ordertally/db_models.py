from decimal import Decimal

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ordertally.order import Order


class Base(DeclarativeBase):
    pass


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(6), index=True)
    request_id: Mapped[int] = mapped_column(BigInteger)
    name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer)
    # Integer cents keep sums exact on engines without a native decimal type.
    price_cents: Mapped[int] = mapped_column(BigInteger)

    @classmethod
    def from_order(cls, order: Order) -> "OrderRow":
        return cls(
            client_id=order.client_id,
            request_id=order.request_id,
            name=order.name,
            quantity=order.quantity,
            price_cents=cents_from_price(order.price),
        )

    def to_order(self) -> Order:
        # Rows only ever come from validated orders.
        return Order(
            client_id=self.client_id,
            request_id=self.request_id,
            name=self.name,
            quantity=self.quantity,
            price=price_from_cents(self.price_cents),
        )


def cents_from_price(price: Decimal) -> int:
    return int(price.scaleb(2))


def price_from_cents(cents: int) -> Decimal:
    return Decimal(cents).scaleb(-2)
