"""
Local-device version storage
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from seatplan.core.config import settings
from seatplan.schemas.plan import SavedVersion

logger = logging.getLogger(__name__)

SAVED_VERSIONS_KEY = "seating-designer-versions"

class LocalStorage:
    """String key-value store persisted to one JSON file"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or settings.LOCAL_STORAGE_FILE)

    def _read_all(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Local storage at {self.path} is unreadable: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

class LocalVersionStore:
    """Most recent versions kept on this device, newest first"""

    def __init__(self, storage: Optional[LocalStorage] = None, limit: Optional[int] = None):
        self.storage = storage or LocalStorage()
        self.limit = limit or settings.LOCAL_VERSIONS_LIMIT

    def list(self) -> List[SavedVersion]:
        raw = self.storage.get_item(SAVED_VERSIONS_KEY)
        if not raw:
            return []
        try:
            items: Any = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable local versions")
            return []
        if not isinstance(items, list):
            return []

        versions = []
        for item in items:
            try:
                versions.append(SavedVersion.model_validate(item))
            except ValueError as e:
                logger.warning(f"Skipping malformed local version: {e}")
        return versions

    def _write(self, versions: List[SavedVersion]) -> None:
        try:
            self.storage.set_item(SAVED_VERSIONS_KEY, json.dumps([v.to_json_dict() for v in versions]))
        except OSError as e:
            logger.error(f"Failed to persist local versions: {e}")
            raise

    def get(self, version_id: str) -> Optional[SavedVersion]:
        return next((v for v in self.list() if v.id == version_id), None)

    def add(self, version: SavedVersion) -> List[SavedVersion]:
        versions = [version, *self.list()][:self.limit]
        self._write(versions)
        return versions

    def delete(self, version_id: str) -> bool:
        versions = self.list()
        remaining = [v for v in versions if v.id != version_id]
        if len(remaining) == len(versions):
            return False
        self._write(remaining)
        return True
