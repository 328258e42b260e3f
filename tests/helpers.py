"""Builders for in-memory test documents."""

import io
import zipfile

from app.summarizer.models import AnalysisMetadata, AnalysisResult

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
MISSING_OBJECT = 9999

CONTENT_TYPES_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="{target}"/>
</Relationships>"""


def build_docx(
    body_xml: str,
    main_part: str = "word/document.xml",
    include_rels: bool = True,
) -> bytes:
    """Build a minimal .docx package around a w:body fragment."""
    document_xml = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body_xml}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES_XML)
        if include_rels:
            archive.writestr("_rels/.rels", PACKAGE_RELS_XML.format(target=main_part))
        archive.writestr(main_part, document_xml)
    return buffer.getvalue()


def build_pdf(page_texts: list[str], broken_pages: frozenset[int] = frozenset()) -> bytes:
    """Build a PDF with one Helvetica text line per page and a valid xref.

    Pages whose 1-based number is in broken_pages reference a content
    stream object that does not exist.
    """
    count = len(page_texts)
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(count))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(page_texts):
        content_ref = MISSING_OBJECT if i + 1 in broken_pages else 5 + 2 * i
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> "
                f"/Contents {content_ref} 0 R >>"
            ).encode()
        )
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


def paragraph(*runs: str) -> str:
    """WordprocessingML paragraph with one run per argument.

    The markers "<tab>" and "<br>" produce tab and break runs.
    """
    parts = []
    for run in runs:
        if run == "<tab>":
            parts.append("<w:r><w:tab/></w:r>")
        elif run == "<br>":
            parts.append("<w:r><w:br/></w:r>")
        else:
            parts.append(f'<w:r><w:t xml:space="preserve">{run}</w:t></w:r>')
    return f"<w:p>{''.join(parts)}</w:p>"


def table(*rows: list[str]) -> str:
    """WordprocessingML table; each cell holds a single paragraph."""
    xml_rows = []
    for row in rows:
        cells = "".join(
            f"<w:tc>{paragraph(cell) if cell else '<w:p/>'}</w:tc>" for cell in row
        )
        xml_rows.append(f"<w:tr>{cells}</w:tr>")
    return f"<w:tbl>{''.join(xml_rows)}</w:tbl>"


class FakeAnalysisService:
    """Analysis stand-in that records calls."""

    def __init__(self, result: AnalysisResult | None = None):
        self.result = result or AnalysisResult(
            summary="An invoice from Acme Corp to Jane Doe.",
            document_type="invoice",
            metadata=AnalysisMetadata(company="Acme Corp", amount="120.50", currency="USD"),
        )
        self.calls: list[str] = []

    async def analyze(self, text: str) -> AnalysisResult:
        self.calls.append(text)
        return self.result

