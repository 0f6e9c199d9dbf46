"""Visual review of resume images and scanned PDFs.

Uses Claude Vision. PDF pages are rasterised with PyMuPDF (fitz) and
reviewed one page at a time.
"""

from __future__ import annotations

import logging

from skillx.clients.llm_client import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_SCAN_PROMPT = (
    "Analyze this resume/document image. Identify the candidate's core strengths, "
    "years of experience, and any visual presentation issues. Be thorough."
)

_EXT_MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

PDF_DPI = 150


def pdf_to_images(pdf_bytes: bytes) -> list[tuple[bytes, str]]:
    """Convert PDF pages to PNG images, one (bytes, media_type) per page."""
    import fitz  # PyMuPDF

    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    images = []
    try:
        matrix = fitz.Matrix(PDF_DPI / 72, PDF_DPI / 72)
        for page in doc:
            pix = page.get_pixmap(matrix=matrix)
            images.append((pix.tobytes("png"), "image/png"))
    finally:
        doc.close()
    return images


def media_type_for(filename: str) -> str | None:
    lower = filename.lower()
    for ext, mt in _EXT_MEDIA_TYPES.items():
        if lower.endswith(ext):
            return mt
    return None


async def scan_document(
    llm: LLMClient,
    file_bytes: bytes,
    filename: str,
    prompt: str = DEFAULT_SCAN_PROMPT,
) -> str:
    """Run a visual review over an image or every page of a PDF.

    Args:
        llm: LLMClient instance with Vision support.
        file_bytes: Raw file bytes.
        filename: Original filename (used to detect file type).
        prompt: What the reviewer should look for.

    Returns:
        The review text; multi-page PDFs get one section per page.
    """
    if filename.lower().endswith(".pdf"):
        images = pdf_to_images(file_bytes)
        if not images:
            raise ValueError("The PDF has no pages.")

        parts = []
        for i, (img_bytes, media_type) in enumerate(images, 1):
            logger.info("Scanning PDF page %d/%d", i, len(images))
            review = await llm.analyze_image(img_bytes, media_type, prompt)
            parts.append(review if len(images) == 1 else f"## Page {i}\n\n{review}")
        return "\n\n".join(parts)

    media_type = media_type_for(filename)
    if not media_type:
        raise ValueError(
            f"Unsupported file type: {filename}. "
            f"Supported: PNG, JPG, JPEG, GIF, WEBP, PDF."
        )
    return await llm.analyze_image(file_bytes, media_type, prompt)
