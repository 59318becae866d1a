import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.errors import ContentValidationError, PersistenceIOError
from ..core.validation import validate_bundle


logger = logging.getLogger(__name__)


class ContentStore:
    """Single JSON document holding the live content bundle.

    A missing, unreadable or malformed file reads as "no content" so callers
    fall back to defaults. Writes are the opposite: an invalid candidate is
    rejected before the file is touched, and I/O failures are raised.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Dict[str, Any]]:
        if not self._path.exists():
            return None

        try:
            with self._path.open("r", encoding="utf-8") as f:
                parsed = json.load(f)
        except (OSError, RecursionError, ValueError) as e:
            logger.error(f"Failed to load persisted data from {self._path}: {e}")
            return None

        validation = validate_bundle(parsed)
        if not validation.ok:
            logger.warning(f"Invalid persisted data ignored: {validation.errors}")
            return None
        return parsed

    def save(self, candidate: Any) -> None:
        """Replace the stored bundle with ``candidate``.

        Raises ContentValidationError (file untouched) or PersistenceIOError.
        """
        validation = validate_bundle(candidate)
        if not validation.ok:
            raise ContentValidationError(validation.errors)

        directory = self._path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(candidate, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            logger.error(f"Failed to write content to {self._path}: {e}")
            raise PersistenceIOError(str(self._path), e) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
