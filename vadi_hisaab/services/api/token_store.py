"""
Session Token Store

The only state kept on disk: one opaque bearer token, stored until the
farmer logs out.
"""

from pathlib import Path
from typing import Optional

import structlog


logger = structlog.get_logger(__name__)


class TokenStore:
    """A single token in a single file."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._token: Optional[str] = None
        self._loaded = False

    def get(self) -> Optional[str]:
        if not self._loaded:
            self._token = self._read()
            self._loaded = True
        return self._token

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(token, encoding="utf-8")
        self._path.chmod(0o600)
        self._token = token
        self._loaded = True
        logger.debug("token_saved", path=str(self._path))

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        self._token = None
        self._loaded = True
        logger.debug("token_cleared", path=str(self._path))

    def _read(self) -> Optional[str]:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None


class MemoryTokenStore(TokenStore):
    """Token held in memory only; nothing touches the disk."""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._loaded = True

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
