"""
Repository layer abstracting version storage (JSON files vs SQLAlchemy).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from seatplan.core.config import settings
from seatplan.models import Version
from seatplan.utils.ids import is_valid_version_id, new_version_id
from seatplan.utils.timestamps import format_saved_at, parse_saved_at, utc_now

logger = logging.getLogger(__name__)


def use_sql() -> bool:
    return settings.VERSIONS_BACKEND.lower() == "sql"


def _meta(data: Any) -> Dict[str, str]:
    """Listing entry of a stored version; raises ValueError when malformed"""
    if not isinstance(data, dict):
        raise ValueError("version is not an object")
    meta = {key: data.get(key) for key in ("id", "name", "savedAt")}
    if not all(isinstance(v, str) for v in meta.values()):
        raise ValueError("version is missing id, name or savedAt")
    parse_saved_at(meta["savedAt"])
    return meta


def _document(version_id: str, saved_at: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    full = {
        "id": version_id,
        "name": payload["name"],
        "savedAt": saved_at,
        "guests": payload["guests"],
        "tables": payload["tables"],
    }
    for key in ("stageSize", "pan"):
        if payload.get(key) is not None:
            full[key] = payload[key]
    return full


# -------- Version repository --------

class VersionRepo:
    # Filesystem shape: one "<id>.json" document per version in a directory
    @staticmethod
    def ensure_dir_fs(directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.error(f"Failed to create versions directory {directory}")
            raise

    @staticmethod
    def list_fs(directory: Path) -> List[Dict[str, str]]:
        VersionRepo.ensure_dir_fs(directory)
        metas: List[Dict[str, str]] = []
        for path in directory.iterdir():
            if not path.is_file() or path.suffix != ".json":
                continue
            if not is_valid_version_id(path.stem):
                continue
            try:
                metas.append(_meta(json.loads(path.read_text(encoding="utf-8"))))
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable version file {path.name}: {e}")
        metas.sort(key=lambda m: parse_saved_at(m["savedAt"]), reverse=True)
        return metas

    @staticmethod
    def get_fs(directory: Path, version_id: str) -> Optional[Dict[str, Any]]:
        if not is_valid_version_id(version_id):
            return None
        path = directory / f"{version_id}.json"
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except ValueError as e:
            logger.warning(f"Version file {path.name} is corrupted: {e}")
            return None

    @staticmethod
    def save_fs(directory: Path, payload: Dict[str, Any]) -> Dict[str, str]:
        VersionRepo.ensure_dir_fs(directory)
        version_id = new_version_id()
        saved_at = format_saved_at(utc_now())
        path = directory / f"{version_id}.json"
        try:
            path.write_text(json.dumps(_document(version_id, saved_at, payload)), encoding="utf-8")
        except OSError:
            logger.error(f"Failed to save version {version_id} to {path}")
            raise
        logger.info(f"Saved version {version_id} to {path}")
        return {"id": version_id, "name": payload["name"], "savedAt": saved_at}

    @staticmethod
    def delete_fs(directory: Path, version_id: str) -> bool:
        if not is_valid_version_id(version_id):
            return False
        try:
            (directory / f"{version_id}.json").unlink()
        except FileNotFoundError:
            return False
        return True

    # SQL shape: one row per version, data kept as a JSON text blob
    @staticmethod
    def list_sql(db: Session) -> List[Dict[str, str]]:
        rows = db.query(Version).order_by(Version.saved_at.desc()).all()
        return [
            {"id": row.id, "name": row.name, "savedAt": format_saved_at(row.saved_at)}
            for row in rows
        ]

    @staticmethod
    def get_sql(db: Session, version_id: str) -> Optional[Dict[str, Any]]:
        if not is_valid_version_id(version_id):
            return None
        row = db.query(Version).filter(Version.id == version_id).first()
        if not row:
            return None
        try:
            payload = json.loads(row.payload)
        except ValueError as e:
            logger.warning(f"Version {version_id} has a corrupted payload: {e}")
            return None
        return _document(row.id, format_saved_at(row.saved_at), {"name": row.name, **payload})

    @staticmethod
    def save_sql(db: Session, payload: Dict[str, Any]) -> Dict[str, str]:
        now = utc_now()
        row = Version(
            id=new_version_id(),
            name=payload["name"],
            saved_at=now,
            payload=json.dumps({
                key: payload[key]
                for key in ("guests", "tables", "stageSize", "pan")
                if payload.get(key) is not None
            })
        )
        db.add(row)
        db.commit()
        logger.info(f"Saved version {row.id} to database")
        return {"id": row.id, "name": row.name, "savedAt": format_saved_at(now)}

    @staticmethod
    def delete_sql(db: Session, version_id: str) -> bool:
        if not is_valid_version_id(version_id):
            return False
        row = db.query(Version).filter(Version.id == version_id).first()
        if not row:
            return False
        db.delete(row)
        db.commit()
        return True
