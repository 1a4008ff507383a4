"""Minimal single-font PDF writer for text reports."""
from io import BytesIO
from textwrap import wrap

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN_X = 50
MARGIN_Y = 50
LINE_HEIGHT = 16
TITLE_SIZE = 18
BODY_SIZE = 11
MAX_CHARS = 90


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _to_latin1(text: str) -> str:
    # Base-14 fonts only cover Latin-1.
    return text.encode("latin-1", "replace").decode("latin-1")


def _split_lines(lines):
    for line in lines:
        line = _to_latin1(str(line))
        if not line:
            yield ""
            continue
        yield from wrap(line, MAX_CHARS) or [""]


def _paginate(lines, first_page_reserved):
    max_lines = int((PAGE_HEIGHT - (2 * MARGIN_Y)) / LINE_HEIGHT)
    pages = []
    current = []
    capacity = max_lines - first_page_reserved
    for line in _split_lines(lines):
        if len(current) >= capacity:
            pages.append(current)
            current = []
            capacity = max_lines
        current.append(line)
    if current or not pages:
        pages.append(current)
    return pages


def _build_page_stream(lines, title=None):
    parts = ["BT", f"{MARGIN_X} {PAGE_HEIGHT - MARGIN_Y} Td"]
    if title:
        parts.append(f"/F2 {TITLE_SIZE} Tf")
        parts.append(f"({_escape(_to_latin1(title))}) Tj")
        parts.append(f"0 -{LINE_HEIGHT * 2} Td")
    parts.append(f"/F1 {BODY_SIZE} Tf")
    for line in lines:
        parts.append(f"({_escape(line)}) Tj")
        parts.append(f"0 -{LINE_HEIGHT} Td")
    parts.append("ET")
    return "\n".join(parts)


def build_pdf(lines, title=None) -> bytes:
    """Render text lines into a PDF; `title` is drawn bold on the first page."""
    pages = _paginate(lines, 2 if title else 0)
    page_count = len(pages)
    # Objects: 1 body font, 2 bold font, then a content/page pair per page.
    pages_obj_num = (2 * page_count) + 3

    objects = [
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding >>",
    ]
    for idx, page_lines in enumerate(pages):
        content_obj_num = 2 * idx + 3
        stream = _build_page_stream(page_lines, title if idx == 0 else None)
        stream_bytes = stream.encode("latin-1")
        objects.append(f"<< /Length {len(stream_bytes)} >>\nstream\n{stream}\nendstream")
        objects.append(
            "<< /Type /Page "
            f"/Parent {pages_obj_num} 0 R "
            "/Resources << /Font << /F1 1 0 R /F2 2 0 R >> >> "
            f"/MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            f"/Contents {content_obj_num} 0 R >>"
        )

    kids = " ".join(f"{2 * idx + 4} 0 R" for idx in range(page_count))
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>")
    objects.append(f"<< /Type /Catalog /Pages {pages_obj_num} 0 R >>")

    buffer = BytesIO()
    buffer.write(b"%PDF-1.4\n")
    offsets = [0]
    for i, obj in enumerate(objects, start=1):
        offsets.append(buffer.tell())
        buffer.write(f"{i} 0 obj\n".encode("latin-1"))
        buffer.write(obj.encode("latin-1"))
        buffer.write(b"\nendobj\n")

    xref_start = buffer.tell()
    buffer.write(f"xref\n0 {len(offsets)}\n".encode("latin-1"))
    buffer.write(b"0000000000 65535 f \n")
    for offset in offsets[1:]:
        buffer.write(f"{offset:010d} 00000 n \n".encode("latin-1"))
    buffer.write(b"trailer\n")
    buffer.write(f"<< /Size {len(offsets)} /Root {len(objects)} 0 R >>\n".encode("latin-1"))
    buffer.write(f"startxref\n{xref_start}\n%%EOF".encode("latin-1"))
    return buffer.getvalue()
