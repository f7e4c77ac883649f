from dataclasses import dataclass
from enum import Enum

from ordertally.order import CSV_HEADER, Order


WRONG_FORMAT = "wrong format"


class SourceFormat(str, Enum):
    CSV = "csv"
    XML = "xml"


class FileStatus(str, Enum):
    LOADED = "loaded"
    # Parsed fine but nothing survived validation.
    EMPTY = "empty"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class RejectedLine:
    line: str
    reason: str = WRONG_FORMAT
    detail: str | None = None


@dataclass(frozen=True)
class IngestResult:
    source_name: str
    source_format: SourceFormat | None
    status: FileStatus
    accepted: int = 0
    rejected_lines: tuple[RejectedLine, ...] = ()
    error: str | None = None

    @property
    def loaded(self) -> bool:
        return self.status is FileStatus.LOADED


@dataclass(frozen=True)
class BatchResult:
    files: tuple[IngestResult, ...]

    @property
    def any_loaded(self) -> bool:
        return any(result.loaded for result in self.files)

    @property
    def accepted(self) -> int:
        return sum(result.accepted for result in self.files)


class ReportKind(Enum):
    ORDERS_AMOUNT = ("orders-amount", "Total amount of orders")
    TOTAL_PRICE = ("total-price", "Total price of orders")
    ORDERS_LIST = ("orders-list", "List of all orders")
    AVERAGE_PRICE = ("average-price", "Average price of order")

    def __init__(self, slug: str, display_name: str) -> None:
        self.slug = slug
        self.display_name = display_name

    @classmethod
    def from_slug(cls, slug: str) -> "ReportKind":
        for kind in cls:
            if kind.slug == slug:
                return kind
        raise ValueError(f"unknown report kind: {slug}")

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class ReportParams:
    kind: ReportKind
    client_id: str | None = None

    @property
    def report_name(self) -> str:
        if self.client_id is None:
            return self.kind.display_name
        return f"{self.kind.display_name} (clientId: {self.client_id})"


@dataclass(frozen=True)
class ScalarReport:
    name: str
    value: str

    def lines(self) -> list[str]:
        return [f"{self.name}:", self.value]


@dataclass(frozen=True)
class ListReport:
    name: str
    orders: tuple[Order, ...]

    def lines(self) -> list[str]:
        return [CSV_HEADER, *(order.render() for order in self.orders)]


Report = ScalarReport | ListReport
