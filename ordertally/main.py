import argparse
import logging
from pathlib import Path

from ordertally.config import Settings, get_settings
from ordertally.database import build_session_factory
from ordertally.errors import DuplicateReportError
from ordertally.ingestion import IngestionPipeline
from ordertally.order_store import OrderStore
from ordertally.reports import ReportSession, default_export_name, export_report, serialize_report
from ordertally.schemas import BatchResult, FileStatus, IngestResult, ReportKind, ReportParams


logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load order files and build reports")
    subparsers = parser.add_subparsers(dest="command", required=True)

    load_parser = subparsers.add_parser("load", help="load order files and print reports")
    load_parser.add_argument("files", nargs="+", type=Path, help="CSV or XML order files")
    load_parser.add_argument(
        "--report",
        action="append",
        default=[],
        choices=[kind.slug for kind in ReportKind],
        help="report to generate; may be given more than once",
    )
    load_parser.add_argument("--client-id", default=None, help="only report on this client")
    load_parser.add_argument("--export", action="store_true", help="also write each report to a file")
    load_parser.add_argument("--export-dir", type=Path, default=None, help="where exported reports go")

    clients_parser = subparsers.add_parser("clients", help="list client ids found in order files")
    clients_parser.add_argument("files", nargs="+", type=Path, help="CSV or XML order files")

    return parser.parse_args(argv)


def describe_file(result: IngestResult) -> str:
    label = result.source_format.value.upper() if result.source_format else "Order"
    if result.status is FileStatus.LOADED:
        return f"{label} file {result.source_name} loaded successfully!"
    if result.status is FileStatus.EMPTY:
        return f"No suitable lines found in {label} file {result.source_name}!"
    if result.status is FileStatus.UNSUPPORTED:
        return f"Wrong file type of file {result.source_name}"
    return f"Couldn't read {label} file {result.source_name}: {result.error}"


def log_batch(batch: BatchResult) -> None:
    for result in batch.files:
        for rejected in result.rejected_lines:
            logger.warning(
                'Line "%s" skipped - %s!',
                rejected.line,
                rejected.reason,
                extra={"source_name": result.source_name, "detail": rejected.detail},
            )
        message = describe_file(result)
        if result.loaded:
            logger.info(message, extra={"source_name": result.source_name, "accepted": result.accepted})
        else:
            logger.warning(message, extra={"source_name": result.source_name, "status": result.status.value})


def run_reports(session: ReportSession, args: argparse.Namespace, settings: Settings) -> None:
    export_dir = args.export_dir or Path(settings.export_dir)
    for slug in args.report:
        params = ReportParams(kind=ReportKind.from_slug(slug), client_id=args.client_id)
        try:
            report = session.create(params)
        except DuplicateReportError as exc:
            logger.error(str(exc), extra={"report_name": exc.report_name})
            continue

        print(serialize_report(report))
        if args.export:
            path = export_report(report, export_dir / default_export_name(report))
            logger.info("report exported", extra={"report_name": report.name, "path": str(path)})


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    store = OrderStore(build_session_factory(settings.database_url))
    session = ReportSession(store)
    pipeline = IngestionPipeline(store, report_session=session)

    batch = pipeline.ingest_batch(args.files)
    log_batch(batch)
    if not batch.any_loaded:
        raise SystemExit(1)

    if args.command == "clients":
        for client_id in store.distinct_client_ids():
            print(client_id)
        return

    run_reports(session, args, settings)


if __name__ == "__main__":
    main()
