"""Format parsers that turn raw file bytes into order field tuples.

Every parser yields ``(fields, line)`` pairs where ``fields`` follows
``ORDER_FIELDS`` order and ``line`` is the text shown when the record is
skipped. Parsers do no validation beyond what the format itself demands.
"""
from collections.abc import Callable, Iterator
from pathlib import Path
import re
import xml.etree.ElementTree as ET

from ordertally.errors import MalformedSourceError, UnsupportedFormatError
from ordertally.order import ORDER_FIELDS
from ordertally.schemas import SourceFormat


CSV_DELIMITER = ","
REQUEST_TAG = "request"
LINE_BREAK = re.compile(r"\r\n|\r|\n")

ParsedRow = tuple[tuple[str, ...], str]
Parser = Callable[[bytes], Iterator[ParsedRow]]


def parse_csv(data: bytes) -> Iterator[ParsedRow]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(f"not valid UTF-8: {exc}") from exc

    header_seen = False
    for line in LINE_BREAK.split(text):
        if not line.strip():
            continue
        if not header_seen:
            header_seen = True
            continue
        yield tuple(line.split(CSV_DELIMITER)), line


def parse_xml(data: bytes) -> Iterator[ParsedRow]:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise MalformedSourceError(f"not well-formed XML: {exc}") from exc

    for element in root.iter(REQUEST_TAG):
        fields = tuple(_child_text(element, tag) for tag in ORDER_FIELDS)
        yield fields, CSV_DELIMITER.join(fields)


def _child_text(element: ET.Element, tag: str) -> str:
    # A missing tag is left for order validation to reject.
    child = element.find(f".//{tag}")
    if child is None:
        return ""
    return "".join(child.itertext())


_PARSERS: dict[SourceFormat, Parser] = {
    SourceFormat.CSV: parse_csv,
    SourceFormat.XML: parse_xml,
}


def get_parser(source_format: SourceFormat) -> Parser:
    return _PARSERS[source_format]


def detect_format(path: Path) -> SourceFormat:
    suffix = path.suffix.lower().lstrip(".")
    try:
        return SourceFormat(suffix)
    except ValueError as exc:
        raise UnsupportedFormatError(f"Wrong file type of file {path.name}") from exc
