from typing import Iterable, List
from urllib.parse import unquote


def display_path(url: str) -> str:
    """Percent-decoded URL for display/copy; the raw URL if it does not decode."""
    if not url:
        return ""
    try:
        return unquote(url, errors="strict")
    except UnicodeDecodeError:
        return url


def hashtags(keywords: Iterable[str]) -> List[str]:
    return [f"#{k}" for k in keywords if k]
