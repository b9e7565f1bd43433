import io
import structlog
from pathlib import Path
from typing import Optional, Union
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = structlog.get_logger()


def extract_pdf_text(source: Union[bytes, str, Path], max_pages: int = 50) -> Optional[str]:
    """
    Extracts text from a PDF using pypdf.

    Returns None when the file can't be read or holds no text layer
    (e.g. scanned documents).
    """
    try:
        if isinstance(source, bytes):
            reader = PdfReader(io.BytesIO(source))
        else:
            reader = PdfReader(str(source))

        text = ""
        for i, page in enumerate(reader.pages):
            if i >= max_pages:
                break
            text += (page.extract_text() or "") + "\n"
    except (PdfReadError, OSError, ValueError) as e:
        logger.warning("pdf_parse_failed", error=str(e))
        return None

    text = text.strip()
    if not text:
        logger.info("pdf_has_no_text")
        return None
    return text
