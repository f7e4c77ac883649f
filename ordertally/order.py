from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import re


ORDER_FIELDS = ("clientId", "requestId", "name", "quantity", "price")
CSV_HEADER = "Client_Id,Request_Id,Name,Quantity,Price"

INT64_MAX = 2**63 - 1
INT32_MAX = 2**31 - 1

_LETTERS = "a-zA-Z0-9ĄąĆćĘęŁłŃńÓóŚśŹźŻż"
CLIENT_ID_PATTERN = re.compile(f"[{_LETTERS}]{{1,6}}")
NAME_PATTERN = re.compile(f"[{_LETTERS} ]{{1,255}}")
DIGITS_PATTERN = re.compile(r"[0-9]+")
PRICE_PATTERN = re.compile(r"[0-9]{1,10}\.[0-9]{2}")
# Control characters and the ASCII space; non-ASCII whitespace is not trimmed.
TRIMMED_CHARS = "".join(chr(code) for code in range(0x21))


@dataclass(frozen=True)
class Order:
    client_id: str
    request_id: int
    name: str
    quantity: int
    price: Decimal

    def render(self) -> str:
        return f"{self.client_id},{self.request_id},{self.name},{self.quantity},{self.price}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class SchemaValidationError:
    """Why a set of raw fields could not become an Order.

    ``field`` is None when the failure is about the shape of the input
    (wrong field count) rather than a single value.
    """

    field: str | None
    value: str | None
    message: str

    def __str__(self) -> str:
        return self.message


def strip_leading_zeros(value: str) -> str:
    # One zero survives when it sits right before the decimal point.
    for index, char in enumerate(value):
        if char != "0":
            if char == "." and index != 0:
                return value[index - 1 :]
            return value[index:]
    return value


def _is_bounded_int(value: str, upper: int) -> bool:
    if DIGITS_PATTERN.fullmatch(value) is None:
        return False
    # Length check first keeps int() away from huge digit strings.
    significant = value.lstrip("0") or "0"
    return len(significant) <= len(str(upper)) and int(significant) <= upper


def _is_price(value: str) -> bool:
    if PRICE_PATTERN.fullmatch(strip_leading_zeros(value)) is None:
        return False
    try:
        Decimal(value)
    except InvalidOperation:
        return False
    return True


def check_fields(raw_fields: Sequence[str | None]) -> SchemaValidationError | None:
    if len(raw_fields) != len(ORDER_FIELDS):
        return SchemaValidationError(
            None, None, f"expected {len(ORDER_FIELDS)} fields, got {len(raw_fields)}"
        )

    for field_name, value in zip(ORDER_FIELDS, raw_fields):
        if value is None:
            return SchemaValidationError(field_name, None, f"{field_name} is missing")

    client_id, request_id, name, quantity, price = raw_fields

    if CLIENT_ID_PATTERN.fullmatch(client_id) is None:
        return SchemaValidationError(
            "clientId", client_id, "clientId must be 1-6 letters or digits without spaces"
        )
    if not _is_bounded_int(request_id, INT64_MAX):
        return SchemaValidationError(
            "requestId", request_id, "requestId must be a non-negative 64-bit integer"
        )
    if NAME_PATTERN.fullmatch(name.strip(TRIMMED_CHARS)) is None:
        return SchemaValidationError(
            "name", name, "name must be 1-255 letters, digits or spaces"
        )
    if not _is_bounded_int(quantity, INT32_MAX):
        return SchemaValidationError(
            "quantity", quantity, "quantity must be a non-negative 32-bit integer"
        )
    if not _is_price(price):
        return SchemaValidationError(
            "price", price, "price must have 1-10 integer digits and exactly 2 decimals"
        )
    return None


def new_order(raw_fields: Sequence[str | None]) -> Order | SchemaValidationError:
    """Build an Order from five raw text fields in canonical order.

    Returns the Order, or a SchemaValidationError describing the first
    failing check. Nothing is raised for bad input.
    """
    error = check_fields(raw_fields)
    if error is not None:
        return error

    client_id, request_id, name, quantity, price = raw_fields
    return Order(
        client_id=client_id,
        request_id=int(request_id),
        name=name,
        quantity=int(quantity),
        price=Decimal(price),
    )


def new_order_from_values(
    client_id: str,
    request_id: int,
    name: str,
    quantity: int,
    price: Decimal,
) -> Order | SchemaValidationError:
    """Typed variant of new_order; values are checked through their text form."""
    expected_types = zip(
        ORDER_FIELDS,
        (client_id, request_id, name, quantity, price),
        (str, int, str, int, Decimal),
    )
    for field_name, value, expected in expected_types:
        # bool is an int subclass but never a valid id or quantity.
        if value is not None and (not isinstance(value, expected) or isinstance(value, bool)):
            return SchemaValidationError(
                field_name, repr(value), f"{field_name} must be of type {expected.__name__}"
            )

    raw = (
        client_id,
        None if request_id is None else str(request_id),
        name,
        None if quantity is None else str(quantity),
        None if price is None else str(price),
    )
    error = check_fields(raw)
    if error is not None:
        return error
    return Order(
        client_id=client_id,
        request_id=request_id,
        name=name,
        quantity=quantity,
        price=Decimal(price),
    )
