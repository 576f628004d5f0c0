import html
import re

_UNSAFE_HEADER_CHARS = re.compile(r"[\r\n\x00-\x1f\x7f]")


def escape_html(text: str | None) -> str:
    """
    Escape the five HTML special characters (& < > " ').

    Used for every tenant-supplied value interpolated into markup,
    attribute positions included.
    """
    if not text:
        return ""
    return html.escape(text, quote=True).replace("&#x27;", "&#039;")


def normalize_image_url(image_url: object) -> str | None:
    """
    Return the trimmed URL if it is absolute http(s), otherwise None.

    Relative paths, data: URIs and non-string values are treated as absent.
    """
    if not isinstance(image_url, str):
        return None
    trimmed = image_url.strip()
    if not trimmed:
        return None
    if trimmed.startswith("http://") or trimmed.startswith("https://"):
        return trimmed
    return None


def header_safe(value: str | None, max_length: int = 200) -> str:
    """Make a tenant value safe to echo in a response header."""
    if not value:
        return ""
    cleaned = _UNSAFE_HEADER_CHARS.sub(" ", value)
    # Header values must be latin-1 encodable.
    cleaned = cleaned.encode("latin-1", errors="replace").decode("latin-1")
    return cleaned[:max_length]
