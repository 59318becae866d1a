import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union


logger = logging.getLogger(__name__)

CACHE_KEYS: Dict[str, str] = {
    "albums": "av_albums",
    "fragments": "av_fragments",
    "visuals": "av_visuals",
    "humanManifesto": "av_manifesto",
    "humanIdentity": "av_identity",
    "fictionDec": "av_fiction",
    "aiDec": "av_ai",
    "legalContent": "av_legal",
    "homeContent": "av_home",
    "analyticsContent": "av_analytics",
}

_KEY_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


class LocalCache:
    """Key/value text storage on the local disk, one file per key.

    Values are stored as JSON text. Reads return the raw text so callers can
    decide what counts as corrupt.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self._directory / f"{key}.json"

    def get_raw(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable cache entry {key}: {e}")
            return ""

    def set_raw(self, key: str, text: str) -> None:
        path = self._path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=self._directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
            tmp_name = None
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def set(self, key: str, value: Any) -> None:
        self.set_raw(key, json.dumps(value))

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass

    def __contains__(self, key: str) -> bool:
        return self._path_for(key).exists()
