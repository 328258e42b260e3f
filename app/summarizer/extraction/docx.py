"""
DOCX text extraction.

A .docx file is a ZIP package whose main part is a WordprocessingML XML
document. The body is walked as a stream of XML events so paragraphs and
tables keep their original, interleaved order.
"""

import io
import logging
import posixpath
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import IO

from lxml import etree

from .exceptions import (
    CorruptContainerError,
    EmptyContentError,
    MissingRequiredPartError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAIN_PART = "word/document.xml"
PACKAGE_RELATIONSHIPS = "_rels/.rels"
OFFICE_DOCUMENT_REL_SUFFIX = "/officeDocument"
CELL_SEPARATOR = " | "

# Wrappers inside a paragraph whose runs are still visible text;
# deleted content (w:del, w:moveFrom) is excluded
INLINE_CONTAINERS = frozenset(
    {"hyperlink", "ins", "smartTag", "fldSimple", "customXml", "sdt", "sdtContent", "moveTo"}
)
# Wrappers around paragraphs/tables at body level
BLOCK_CONTAINERS = frozenset({"sdt", "sdtContent", "customXml"})


# =============================================================================
# Document Tree
# =============================================================================


class RunKind(str, Enum):
    """Kind of inline content inside a paragraph."""

    TEXT = "text"
    TAB = "tab"
    BREAK = "break"


@dataclass(frozen=True)
class Run:
    """Smallest inline unit: a text span, a tab or a line break."""

    kind: RunKind
    text: str = ""

    def render(self) -> str:
        if self.kind is RunKind.TAB:
            return "\t"
        if self.kind is RunKind.BREAK:
            return "\n"
        return self.text


@dataclass
class Paragraph:
    runs: list[Run] = field(default_factory=list)

    def render(self) -> str:
        return "".join(run.render() for run in self.runs)


@dataclass
class TableCell:
    paragraphs: list[Paragraph] = field(default_factory=list)

    def render(self) -> str:
        return "".join(p.render() for p in self.paragraphs).strip()


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)

    def render(self) -> str:
        """Join non-empty cells; an all-empty row renders as ''."""
        texts = [text for text in (cell.render() for cell in self.cells) if text]
        return CELL_SEPARATOR.join(texts)


@dataclass
class Table:
    rows: list[TableRow] = field(default_factory=list)

    def render(self) -> str:
        lines = [line for line in (row.render() for row in self.rows) if line]
        return "\n".join(lines)


Block = Paragraph | Table


# =============================================================================
# Extraction
# =============================================================================


def extract_docx(data: bytes) -> str:
    """
    Extract plain text from a DOCX document.

    Args:
        data: Raw .docx bytes.

    Returns:
        Paragraphs and tables rendered in document order, stripped.

    Raises:
        CorruptContainerError: If the ZIP package or its XML is malformed.
        MissingRequiredPartError: If the main document part is absent.
        EmptyContentError: If the document contains no text.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, OSError) as e:
        raise CorruptContainerError(f"Failed to read DOCX as ZIP: {e}") from e

    with archive:
        try:
            part_name = _main_part_name(archive)
            with archive.open(part_name) as stream:
                blocks = parse_body(stream)
        except etree.XMLSyntaxError as e:
            raise CorruptContainerError(f"Failed to parse document XML: {e}") from e
        except (zipfile.BadZipFile, zlib.error, OSError, EOFError) as e:
            raise CorruptContainerError(f"Failed to read DOCX part: {e}") from e

    logger.debug("Parsed %d block element(s) from %s", len(blocks), part_name)

    text = render(blocks).strip()
    if not text:
        raise EmptyContentError("No text could be extracted from DOCX")
    return text


def render(blocks: list[Block]) -> str:
    """Render blocks to plain text, one block per line group."""
    return "\n".join(block.render() for block in blocks)


def _main_part_name(archive: zipfile.ZipFile) -> str:
    """
    Locate the main document part.

    Follows the package-level officeDocument relationship and falls back to
    the conventional word/document.xml.
    """
    names = set(archive.namelist())
    candidates = [DEFAULT_MAIN_PART]

    if PACKAGE_RELATIONSHIPS in names:
        target = _office_document_target(archive.read(PACKAGE_RELATIONSHIPS))
        if target:
            candidates.insert(0, target)

    for candidate in candidates:
        if candidate in names:
            return candidate

    raise MissingRequiredPartError("document.xml not found in DOCX")


def _office_document_target(rels_xml: bytes) -> str | None:
    try:
        root = etree.fromstring(rels_xml, parser=_xml_parser())
    except etree.XMLSyntaxError as e:
        logger.debug("Ignoring unreadable package relationships: %s", e)
        return None

    for rel in root:
        if not isinstance(rel.tag, str):
            continue
        if not rel.get("Type", "").endswith(OFFICE_DOCUMENT_REL_SUFFIX):
            continue
        if rel.get("TargetMode") == "External":
            continue
        target = rel.get("Target")
        if target:
            return posixpath.normpath(target.lstrip("/"))
    return None


def _xml_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True)


# =============================================================================
# Body Parsing
# =============================================================================


def parse_body(source: IO[bytes]) -> list[Block]:
    """
    Parse the body of a WordprocessingML document into ordered blocks.

    Walks start/end events and converts each direct child of w:body as soon
    as it closes, then discards it. Elements are matched by local name so
    transitional and strict namespaces both work.

    Args:
        source: Readable binary stream of the main document part.

    Returns:
        Paragraphs and tables in document order.
    """
    blocks: list[Block] = []
    depth = 0
    body_depth: int | None = None

    events = etree.iterparse(
        source,
        events=("start", "end"),
        resolve_entities=False,
        no_network=True,
    )
    for event, element in events:
        if event == "start":
            depth += 1
            if body_depth is None and _local_name(element) == "body":
                body_depth = depth
            continue

        if body_depth is not None:
            if depth == body_depth + 1:
                blocks.extend(_blocks_from(element))
                _release(element)
            elif depth == body_depth:
                body_depth = None
        depth -= 1

    return blocks


def _blocks_from(element: etree._Element) -> list[Block]:
    name = _local_name(element)
    if name == "p":
        return [_parse_paragraph(element)]
    if name == "tbl":
        return [_parse_table(element)]
    if name in BLOCK_CONTAINERS:
        blocks: list[Block] = []
        for child in element:
            blocks.extend(_blocks_from(child))
        return blocks
    # sectPr, bookmarks and anything else
    return []


def _parse_paragraph(element: etree._Element) -> Paragraph:
    runs: list[Run] = []
    _collect_runs(element, runs)
    return Paragraph(runs)


def _collect_runs(element: etree._Element, runs: list[Run]) -> None:
    for child in element:
        name = _local_name(child)
        if name == "r":
            runs.extend(_parse_run(child))
        elif name in INLINE_CONTAINERS:
            _collect_runs(child, runs)


def _parse_run(element: etree._Element) -> Iterator[Run]:
    for child in element:
        name = _local_name(child)
        if name == "t":
            if child.text:
                yield Run(RunKind.TEXT, child.text)
        elif name == "tab":
            yield Run(RunKind.TAB)
        elif name in ("br", "cr"):
            yield Run(RunKind.BREAK)


def _parse_table(element: etree._Element) -> Table:
    rows = [_parse_row(child) for child in element if _local_name(child) == "tr"]
    return Table(rows)


def _parse_row(element: etree._Element) -> TableRow:
    cells = [_parse_cell(child) for child in element if _local_name(child) == "tc"]
    return TableRow(cells)


def _parse_cell(element: etree._Element) -> TableCell:
    paragraphs = [
        _parse_paragraph(child) for child in element if _local_name(child) == "p"
    ]
    return TableCell(paragraphs)


def _local_name(element: etree._Element) -> str:
    # Comments and processing instructions have non-string tags
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def _release(element: etree._Element) -> None:
    element.clear()
    parent = element.getparent()
    if parent is None:
        return
    while element.getprevious() is not None:
        del parent[0]
