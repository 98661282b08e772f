import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

import pdfplumber
from PIL import Image

from scan2ratios import config


LOGGER = logging.getLogger(__name__)


@dataclass
class TextSource:
    source_file: str
    text: str
    ocr_used: bool
    pages: int = 1


def extract_text(
    path: str,
    ocr: bool = True,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> TextSource:
    if not os.path.exists(path):
        raise ValueError(f"Input file not found: {path}")
    source_file = os.path.basename(path)
    ext = os.path.splitext(path)[1].lower()

    if ext in config.TEXT_EXTENSIONS:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            text = handle.read()
        if "\ufffd" in text:
            LOGGER.warning(
                "Invalid UTF-8 in %s; %d characters replaced",
                source_file,
                text.count("\ufffd"),
            )
        return TextSource(source_file, text, ocr_used=False)

    if ext in config.IMAGE_EXTENSIONS:
        if not ocr:
            raise ValueError(f"OCR disabled; cannot read image {source_file}")
        with Image.open(path) as image:
            text = ocr_image(image)
        if progress_callback:
            progress_callback(1, 1)
        return TextSource(source_file, text, ocr_used=True)

    if ext in config.PDF_EXTENSIONS:
        return _extract_pdf(path, ocr, progress_callback)

    raise ValueError(f"Unsupported file type: {ext or source_file}")


def _extract_pdf(
    path: str,
    ocr: bool,
    progress_callback: Optional[Callable[[int, int], None]],
) -> TextSource:
    parts = []
    ocr_used = False
    with pdfplumber.open(path) as pdf:
        total_pages = len(pdf.pages)
        for page_number, page in enumerate(pdf.pages, start=1):
            text = page.extract_text() or ""
            images_count = len(getattr(page, "images", []))
            if ocr and page_needs_ocr(len(text.strip()), images_count):
                ocr_text = ocr_pdf_page(path, page_number)
                if ocr_text:
                    text = ocr_text
                    ocr_used = True
            elif not text.strip():
                LOGGER.warning("Empty text on page %d", page_number)
            parts.append(text)
            if progress_callback:
                progress_callback(page_number, total_pages)
    return TextSource(
        os.path.basename(path), "\n".join(parts), ocr_used=ocr_used, pages=total_pages
    )


def ocr_image(image) -> str:
    try:
        import pytesseract
    except ImportError as exc:
        raise RuntimeError("OCR requested but pytesseract is not installed.") from exc

    grayscale = image.convert("L")
    return pytesseract.image_to_string(
        grayscale, lang=config.OCR_LANG, config=config.OCR_CONFIG
    )


def ocr_pdf_page(pdf_path: str, page_number: int) -> str:
    try:
        from pdf2image import convert_from_path
    except ImportError as exc:
        raise RuntimeError(
            "OCR requested but pdf2image/pytesseract are not installed."
        ) from exc

    images = convert_from_path(
        pdf_path, dpi=config.OCR_DPI, first_page=page_number, last_page=page_number
    )
    if not images:
        return ""
    return ocr_image(images[0])


def page_needs_ocr(text_len: int, images_count: int) -> bool:
    return text_len < config.THRESHOLD_TEXT_LEN_FOR_OCR and images_count > 0
