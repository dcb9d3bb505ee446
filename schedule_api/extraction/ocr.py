# schedule_api/extraction/ocr.py
# pytesseract for screenshots, pdfplumber text layer (rasterize + OCR for scanned PDFs)

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Optional

from ..errors import OcrError

Recognizer = Callable[[str, str], str]

PDF_SUFFIXES = {".pdf"}


def _configure_tesseract() -> None:
    import pytesseract

    tess_cmd = os.getenv("TESSERACT_CMD", "")
    if tess_cmd and os.path.isfile(tess_cmd):
        pytesseract.pytesseract.tesseract_cmd = tess_cmd


def looks_like_image_only(pages_text: List[str], min_chars_per_page: int = 40) -> bool:
    """
    Heuristic: if >=80% pages have fewer than min_chars_per_page characters, treat as image-only.
    """
    if not pages_text:
        return True
    low = sum(1 for t in pages_text if len(t.strip()) < min_chars_per_page)
    return (low / max(len(pages_text), 1)) >= 0.8


def _recognize_image(image_path: str, lang: str) -> str:
    import pytesseract
    from PIL import Image

    _configure_tesseract()
    with Image.open(image_path) as img:
        return pytesseract.image_to_string(img, lang=lang)


def _recognize_pdf(pdf_path: str, lang: str) -> str:
    """
    Use the PDF text layer when there is one; scanned pages are rasterized and OCR'd.
    """
    import pdfplumber

    with pdfplumber.open(pdf_path) as pdf:
        pages_text = [page.extract_text() or "" for page in pdf.pages]
        if not looks_like_image_only(pages_text):
            return "\n".join(pages_text)

        import pytesseract

        _configure_tesseract()
        return "\n".join(
            pytesseract.image_to_string(page.to_image(resolution=300).original, lang=lang)
            for page in pdf.pages
        )


def tesseract_recognize(file_path: str, lang: str = "eng") -> str:
    """Default OCR engine: raw text for one screenshot (or PDF)."""
    if Path(file_path).suffix.lower() in PDF_SUFFIXES:
        return _recognize_pdf(file_path, lang)
    return _recognize_image(file_path, lang)


def normalize_newlines(raw: str) -> str:
    """Replace real newlines with the literal two-character escape so regexes see one flat line."""
    return raw.replace("\r\n", "\n").replace("\n", "\\n")


def recognize_file(
    file_path: str,
    filename: Optional[str] = None,
    lang: str = "eng",
    recognizer: Recognizer = tesseract_recognize,
) -> Optional[str]:
    """
    OCR one uploaded file.

    Returns the normalized text, or None when the engine produced nothing.
    Any engine failure is re-raised as OcrError carrying the file name.
    """
    name = filename or Path(file_path).name
    try:
        raw = recognizer(file_path, lang)
    except Exception as e:
        raise OcrError(f"Error during OCR the file {name}: {e}", filename=name) from e

    return normalize_newlines(raw or "") or None
