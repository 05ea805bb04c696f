import logging
import asyncio
from typing import Optional

import fitz  # PyMuPDF
from pydantic import BaseModel

from pdfstudio.core.config import settings
from pdfstudio.core.errors import ExtractionError, PayloadTooLargeError, UsageError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"
PDF_MIME = "application/pdf"


class ExtractedText(BaseModel):
    """Plain text of a PDF. `text` may be empty for scanned / image-only files."""
    text: str
    page_count: int


def validate_upload(content: bytes, filename: Optional[str], content_type: Optional[str]) -> None:
    """
    Upload checks performed before any parsing:
    1. Declared type must be application/pdf (or the filename must end in .pdf)
    2. File must not exceed MAX_FILE_SIZE_MB

    Size violations raise PayloadTooLargeError (413).
    """
    declared_pdf = (content_type or "").split(";")[0].strip().lower() == PDF_MIME
    named_pdf = bool(filename) and filename.lower().endswith(".pdf")
    if not (declared_pdf or named_pdf):
        raise UsageError(f"Only PDF files are accepted. Got: '{content_type or filename}'")

    max_bytes = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise PayloadTooLargeError(
            f"File too large ({len(content) / (1024 * 1024):.1f} MB). "
            f"Maximum is {settings.MAX_FILE_SIZE_MB} MB."
        )


async def extract_text_from_file(
    file_content: bytes,
    filename: str,
    content_type: Optional[str] = PDF_MIME,
) -> ExtractedText:
    """
    Extract plain text + page count from a PDF with PyMuPDF.
    Raises UsageError for a non-PDF / oversized upload and ExtractionError
    when the payload cannot be parsed.
    """
    validate_upload(file_content, filename, content_type)

    if len(file_content) == 0:
        raise ExtractionError("File is empty.")

    if not file_content[:1024].lstrip().startswith(PDF_MAGIC):
        raise ExtractionError("File does not appear to be a valid PDF (invalid magic bytes).")

    result = await _extract_from_pdf(file_content)
    logger.info(
        f"[EXTRACT] ✓ {filename} — {result.page_count} pages — {len(result.text)} chars"
    )
    return result


async def _extract_from_pdf(content: bytes) -> ExtractedText:
    """
    Extract text from PDF using PyMuPDF (fitz).
    Runs in a thread pool to avoid blocking the async event loop.
    """
    def _process_pdf(data: bytes) -> ExtractedText:
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                if doc.page_count == 0:
                    raise ExtractionError("PDF has no pages.")

                text_blocks = []
                for page in doc:
                    page_text = page.get_text("text")
                    if page_text.strip():
                        text_blocks.append(page_text.strip())

                return ExtractedText(
                    text="\n\n".join(text_blocks),
                    page_count=doc.page_count,
                )
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"PDF extraction failed: {str(e)}") from e

    return await asyncio.to_thread(_process_pdf, content)
