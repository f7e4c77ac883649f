from pathlib import Path

import pytest

from ordertally.errors import MalformedSourceError, UnsupportedFormatError
from ordertally.parsers import detect_format, get_parser, parse_csv, parse_xml
from ordertally.schemas import SourceFormat


def test_csv_skips_header_and_blank_lines() -> None:
    data = "\n\nClient_Id,Request_Id,Name,Quantity,Price\r\nAB,1,Widget,2,10.00\r\n\r\n   \nCD,2,Gadget,1,5.50".encode()

    rows = list(parse_csv(data))

    assert rows == [
        (("AB", "1", "Widget", "2", "10.00"), "AB,1,Widget,2,10.00"),
        (("CD", "2", "Gadget", "1", "5.50"), "CD,2,Gadget,1,5.50"),
    ]


def test_csv_header_is_dropped_whatever_it_contains() -> None:
    rows = list(parse_csv(b"AB,1,Widget,2,10.00\nCD,2,Gadget,1,5.50\n"))

    assert [line for _, line in rows] == ["CD,2,Gadget,1,5.50"]


def test_csv_passes_any_field_count_through() -> None:
    rows = list(parse_csv(b"header\nAB,1\nAB,1,Widget,2,10.00,\n"))

    assert rows[0][0] == ("AB", "1")
    assert rows[1][0] == ("AB", "1", "Widget", "2", "10.00", "")


def test_csv_tolerates_byte_order_mark() -> None:
    rows = list(parse_csv("\ufeffClient_Id\nŻółć,1,Łódź,2,10.00\n".encode("utf-8")))

    assert rows[0][0][0] == "Żółć"


def test_csv_rejects_undecodable_bytes() -> None:
    with pytest.raises(MalformedSourceError):
        list(parse_csv(b"header\n\xff\xfe,1,x,1,1.00\n"))


XML_SOURCE = b"""<?xml version="1.0" encoding="UTF-8"?>
<requests>
    <request>
        <price>10.00</price>
        <clientId>AB</clientId>
        <requestId>1</requestId>
        <name>Widget</name>
        <quantity>2</quantity>
    </request>
    <request>
        <clientId>CD</clientId>
        <requestId>2</requestId>
        <name>Gadget</name>
        <price>5.50</price>
    </request>
</requests>
"""


def test_xml_reads_children_by_name() -> None:
    rows = list(parse_xml(XML_SOURCE))

    assert rows[0] == (("AB", "1", "Widget", "2", "10.00"), "AB,1,Widget,2,10.00")


def test_xml_missing_child_becomes_empty_string() -> None:
    rows = list(parse_xml(XML_SOURCE))

    assert rows[1] == (("CD", "2", "Gadget", "", "5.50"), "CD,2,Gadget,,5.50")


def test_xml_malformed_document_raises_once() -> None:
    rows = parse_xml(b"<requests><request><clientId>AB</request>")

    with pytest.raises(MalformedSourceError):
        next(rows)


def test_xml_without_requests_yields_nothing() -> None:
    assert list(parse_xml(b"<requests/>")) == []


@pytest.mark.parametrize(
    ("name", "expected"),
    [("orders.csv", SourceFormat.CSV), ("orders.xml", SourceFormat.XML), ("ORDERS.XML", SourceFormat.XML)],
)
def test_detect_format_by_suffix(name: str, expected: SourceFormat) -> None:
    assert detect_format(Path(name)) is expected
    assert get_parser(expected) in (parse_csv, parse_xml)


def test_detect_format_rejects_unknown_suffix() -> None:
    with pytest.raises(UnsupportedFormatError, match="Wrong file type of file orders.json"):
        detect_format(Path("orders.json"))
