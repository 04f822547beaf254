# flashread/utils.py
import re

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(r"</(p|div|h[1-6]|li|br|section|article|header|footer)>", re.IGNORECASE)
_LI_OPEN_RE = re.compile(r"<li>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_MANY_NEWLINES_RE = re.compile(r"\n{3,}")
_HSPACE_RUN_RE = re.compile(r"[ \t]{2,}")
_HSPACE_RE = re.compile(r"[ \t]+")
_LINE_EDGE_RE = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
_RTF_CONTROL_RE = re.compile(r"\\[a-z]+\d*\s?")


def html_to_text(html: str) -> str:
    """Very small tag stripper: good enough to feed a page to the LLM."""
    text = _SCRIPT_RE.sub(" ", html)
    text = _STYLE_RE.sub(" ", text)
    text = _BLOCK_CLOSE_RE.sub("\n", text)
    text = _LI_OPEN_RE.sub("- ", text)
    text = _TAG_RE.sub(" ", text)
    text = _MANY_NEWLINES_RE.sub("\n\n", text)
    text = _HSPACE_RUN_RE.sub(" ", text)
    return text.strip()


def strip_rtf(rtf: str) -> str:
    text = _RTF_CONTROL_RE.sub("", rtf)
    text = text.replace("{", "").replace("}", "")
    text = text.replace("\\\\", "\\").replace("\\'", "'")
    return re.sub(r"\s+", " ", text).strip()


def clean_extracted_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _LINE_EDGE_RE.sub("", text)
    text = _HSPACE_RE.sub(" ", text)
    text = _MANY_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def count_words(text: str) -> int:
    return len(text.split())


def excerpt(text: str, limit: int = 200) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2):g} {units[i]}"
