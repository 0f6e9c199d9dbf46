import re
from pathlib import Path

TEXT_SUFFIXES = (".txt", ".md")


def read_document(file_path: str | Path) -> str:
    """Read a PDF, DOCX, TXT or MD file and return its raw text."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return _read_pdf(path)
    elif suffix == ".docx":
        return _read_docx(path)
    elif suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def normalize_text(text: str) -> str:
    """Collapse the whitespace noise of pasted or extracted text."""
    # Zero-width characters and BOMs survive copy/paste from web pages
    text = re.sub(r"[\u200b\u200c\u200d\u2060\ufeff]", "", text)
    text = re.sub(r"[ \t]+", " ", text)
    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def load_job_description(file_path: str | Path) -> str:
    return normalize_text(read_document(file_path))


def load_resume(file_path: str | Path) -> str:
    return normalize_text(read_document(file_path))


def _read_pdf(path: Path) -> str:
    import fitz  # pymupdf

    doc = fitz.open(str(path))
    try:
        return "\n".join(page.get_text() for page in doc)
    finally:
        doc.close()


def _read_docx(path: Path) -> str:
    from docx import Document

    doc = Document(str(path))
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip())
