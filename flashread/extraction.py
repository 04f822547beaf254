# flashread/extraction.py
"""
Text extraction for uploaded documents.

Dispatch is purely on the declared MIME type:
  text/plain, text/markdown  -> decoded bytes
  .docx                      -> python-docx
  .doc (legacy Word)         -> python-docx, best effort
  application/rtf            -> control-word stripper
Anything else is rejected with UnsupportedFormatError.
"""
import io
import logging
import docx

from .errors import ExtractionError, UnsupportedFormatError, ValidationError
from .schemas import ExtractionResult
from .utils import clean_extracted_text, count_words, strip_rtf, format_file_size

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_TEXT_CHARS = 100_000

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_TYPE = "application/msword"

SUPPORTED_FILE_TYPES = {
    "text/plain": ".txt",
    "text/markdown": ".md",
    DOCX_TYPE: ".docx",
    DOC_TYPE: ".doc",
    "application/rtf": ".rtf",
    "text/rtf": ".rtf",
}

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload Word (.docx/.doc), TXT, MD, or RTF files."


def supported_formats() -> dict:
    return {
        "supported_formats": dict(SUPPORTED_FILE_TYPES),
        "all_extensions": sorted(set(SUPPORTED_FILE_TYPES.values())),
        "max_file_size": MAX_FILE_SIZE,
        "max_file_size_label": format_file_size(MAX_FILE_SIZE),
    }


def validate_upload(file_name: str, content_type: str, size: int) -> None:
    if not file_name:
        raise ValidationError("No file provided")
    if size > MAX_FILE_SIZE:
        raise ValidationError(f"File size must be less than {format_file_size(MAX_FILE_SIZE)}")
    if content_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFormatError(UNSUPPORTED_MESSAGE)


def extract_text_file(content: bytes) -> str:
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ExtractionError("Could not decode text file")


def _docx_text(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    parts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def extract_docx_text(content: bytes) -> str:
    """Extract text from DOCX content"""
    try:
        text = _docx_text(content)
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from Word document: {e}") from e
    if not text.strip():
        raise ExtractionError("No text content found in Word document")
    return text


def extract_doc_text(content: bytes) -> str:
    # Legacy .doc is a binary format python-docx cannot always read.
    try:
        text = _docx_text(content)
    except Exception as e:
        logger.info("python-docx could not read legacy .doc file: %s", e)
        text = ""
    if not text.strip():
        raise ExtractionError("Unable to extract text from legacy Word document")
    return text


def extract(data: bytes, content_type: str, file_name: str = "") -> ExtractionResult:
    """Return cleaned text plus word/char counts for one uploaded file."""
    logger.info("Processing file: %s (%s, %d bytes)", file_name, content_type, len(data))

    if content_type in ("text/plain", "text/markdown"):
        text = extract_text_file(data)
    elif content_type == DOCX_TYPE:
        text = extract_docx_text(data)
    elif content_type == DOC_TYPE:
        text = extract_doc_text(data)
    elif content_type in ("application/rtf", "text/rtf"):
        text = strip_rtf(extract_text_file(data))
    else:
        raise UnsupportedFormatError(UNSUPPORTED_MESSAGE)

    if not text.strip():
        raise ExtractionError("No text content found in document")

    text = clean_extracted_text(text)
    logger.info("Extracted %d characters from %s", len(text), file_name or "upload")
    return ExtractionResult(
        text=text[:MAX_TEXT_CHARS],
        word_count=count_words(text),
        char_count=len(text),
    )
