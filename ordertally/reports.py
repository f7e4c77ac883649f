from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from ordertally.db_models import OrderRow
from ordertally.errors import DuplicateReportError
from ordertally.order_store import OrderStore
from ordertally.schemas import ListReport, Report, ReportKind, ReportParams, ScalarReport


CENT = Decimal("0.01")


def generate_report(store: OrderStore, params: ReportParams) -> Report:
    criteria = []
    if params.client_id is not None:
        criteria.append(OrderRow.client_id == params.client_id)

    name = params.report_name
    kind = params.kind

    if kind is ReportKind.ORDERS_LIST:
        return ListReport(name=name, orders=tuple(store.query(*criteria)))
    if kind is ReportKind.ORDERS_AMOUNT:
        return ScalarReport(name=name, value=str(store.count(*criteria)))
    if kind is ReportKind.TOTAL_PRICE:
        return ScalarReport(name=name, value=str(store.total_price(*criteria)))
    if kind is ReportKind.AVERAGE_PRICE:
        count = store.count(*criteria)
        if count == 0:
            # No matching orders averages to zero rather than failing.
            return ScalarReport(name=name, value=str(Decimal(0).quantize(CENT)))
        average = (store.total_price(*criteria) / count).quantize(CENT, rounding=ROUND_HALF_UP)
        return ScalarReport(name=name, value=str(average))
    raise ValueError(f"unsupported report kind: {kind!r}")


def serialize_report(report: Report) -> str:
    """Canonical text of a report, shared by display and export.

    Lists render as the CSV header followed by one order per line, scalars
    as ``<name>:`` followed by the value. No trailing newline.
    """
    return "\n".join(report.lines())


def default_export_name(report: Report) -> str:
    return report.name.replace(" ", "_") + ".csv"


def export_report(report: Report, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as outfile:
        outfile.write(serialize_report(report))
    return path


class ReportSession:
    """Reports created since the last batch load, without duplicates."""

    def __init__(self, store: OrderStore) -> None:
        self.store = store
        self._reports: list[Report] = []

    @property
    def reports(self) -> tuple[Report, ...]:
        return tuple(self._reports)

    def create(self, params: ReportParams) -> Report:
        report = generate_report(self.store, params)
        if report in self._reports:
            raise DuplicateReportError(report.name)
        self._reports.append(report)
        return report

    def reset(self) -> None:
        self._reports.clear()
