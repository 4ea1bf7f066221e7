"""Load HTML documents and their linked stylesheets."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup

from .errors import DocumentLoadError

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r'charset=["\']?([^"\'\s>;]+)', re.IGNORECASE)


@dataclass
class LoadedDocument:
    """HTML text plus the file it came from (None for literal strings)."""

    html: str
    source_path: Optional[Path] = None

    @property
    def base_dir(self) -> Optional[Path]:
        return self.source_path.parent if self.source_path else None


def looks_like_html(source: str) -> bool:
    """Treat strings starting with ``<`` or containing a doctype as markup."""
    trimmed = source.strip()
    return trimmed.startswith("<") or "<!doctype" in trimmed.lower()


def decode_bytes(data: bytes) -> str:
    """
    Decode HTML or CSS bytes.

    UTF-8 is tried first; otherwise the ``<meta charset>`` declared in the
    first 2KB is used, falling back to UTF-8 with replacement.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    head = data[:2048].decode("latin-1", errors="ignore")
    match = _CHARSET_RE.search(head)
    if match:
        encoding = match.group(1).strip()
        try:
            return data.decode(encoding, errors="replace")
        except LookupError:
            logger.debug(f"Unknown declared encoding: {encoding}")

    return data.decode("utf-8", errors="replace")


def load_file(path: Union[str, Path]) -> LoadedDocument:
    """
    Read an HTML file.

    Raises:
        DocumentLoadError: If the file does not exist or cannot be read
    """
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise DocumentLoadError(f"File not found: {resolved}")
    try:
        data = resolved.read_bytes()
    except OSError as err:
        raise DocumentLoadError(f"Cannot read {resolved}: {err}") from err

    logger.debug(f"Loaded {len(data)} bytes from {resolved}")
    return LoadedDocument(html=decode_bytes(data), source_path=resolved)


def load_html(source: Union[str, Path]) -> LoadedDocument:
    """
    Load HTML from a file path or a literal HTML string.

    Args:
        source: Path, or a string that is either markup or a file path

    Returns:
        LoadedDocument with the HTML text

    Raises:
        DocumentLoadError: If ``source`` names a file that cannot be read
    """
    if isinstance(source, Path):
        return load_file(source)
    if looks_like_html(source):
        return LoadedDocument(html=source)
    return load_file(source)


def load_linked_css(html: str, base_dir: Optional[Path]) -> str:
    """
    Read local stylesheets referenced by ``<link rel="stylesheet">``.

    Remote URLs are ignored. Missing or unreadable files are logged and
    skipped. Stylesheets are concatenated in document order.
    """
    if base_dir is None:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    chunks = []
    for link in soup.find_all("link"):
        rel = [value.lower() for value in link.get("rel", [])]
        href = link.get("href", "")
        if "stylesheet" not in rel or not href:
            continue
        if re.match(r"^[a-z][a-z0-9+.-]*://", href, re.IGNORECASE) or href.startswith("//"):
            logger.debug(f"Skipping remote stylesheet: {href}")
            continue

        css_path = base_dir / href.split("?", 1)[0].split("#", 1)[0]
        try:
            chunks.append(decode_bytes(css_path.read_bytes()))
            logger.debug(f"Loaded linked stylesheet {css_path}")
        except OSError as e:
            logger.warning(f"Cannot read linked stylesheet {css_path}: {e}")

    return "\n".join(chunks)
