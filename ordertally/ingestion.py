from collections.abc import Iterable
from pathlib import Path

from ordertally.errors import MalformedSourceError, UnsupportedFormatError
from ordertally.order import Order, new_order
from ordertally.order_store import OrderStore
from ordertally.parsers import detect_format, get_parser
from ordertally.reports import ReportSession
from ordertally.schemas import BatchResult, FileStatus, IngestResult, RejectedLine, SourceFormat


class IngestionPipeline:
    """Loads order files into an OrderStore and reports what happened per line.

    Nothing here raises for bad data or writes diagnostics: validation
    failures, empty files and unreadable documents all come back as fields
    of the returned IngestResult so the caller can decide how to show them.
    """

    def __init__(self, store: OrderStore, report_session: ReportSession | None = None) -> None:
        self.store = store
        self.report_session = report_session

    def ingest(self, data: bytes, source_format: SourceFormat, source_name: str = "<memory>") -> IngestResult:
        parse = get_parser(source_format)
        accepted: list[Order] = []
        rejected: list[RejectedLine] = []

        try:
            for fields, line in parse(data):
                result = new_order(fields)
                if isinstance(result, Order):
                    accepted.append(result)
                else:
                    rejected.append(RejectedLine(line=line, detail=result.message))
        except MalformedSourceError as exc:
            return IngestResult(
                source_name=source_name,
                source_format=source_format,
                status=FileStatus.MALFORMED,
                error=str(exc),
            )

        # Inserted only once the whole source parsed, so a file is all or nothing.
        if accepted:
            self.store.insert_many(accepted)

        return IngestResult(
            source_name=source_name,
            source_format=source_format,
            status=FileStatus.LOADED if accepted else FileStatus.EMPTY,
            accepted=len(accepted),
            rejected_lines=tuple(rejected),
        )

    def ingest_path(self, path: Path) -> IngestResult:
        path = Path(path)
        try:
            source_format = detect_format(path)
        except UnsupportedFormatError as exc:
            return IngestResult(
                source_name=path.name,
                source_format=None,
                status=FileStatus.UNSUPPORTED,
                error=str(exc),
            )

        try:
            data = path.read_bytes()
        except OSError as exc:
            return IngestResult(
                source_name=path.name,
                source_format=source_format,
                status=FileStatus.UNREADABLE,
                error=str(exc),
            )

        return self.ingest(data, source_format, source_name=path.name)

    def ingest_batch(self, paths: Iterable[Path]) -> BatchResult:
        # A new batch always replaces whatever the previous one loaded.
        self.store.clear()
        if self.report_session is not None:
            # Reports built from the previous batch no longer describe the store.
            self.report_session.reset()
        return BatchResult(files=tuple(self.ingest_path(path) for path in paths))
