"""
Version store API routes
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seatplan.core.config import settings
from seatplan.core.db import get_db
from seatplan.services.repositories import VersionRepo, use_sql
from seatplan.utils.responses import not_found_error, storage_error, validation_error

logger = logging.getLogger(__name__)

router = APIRouter()

STORAGE_ERRORS = (OSError, SQLAlchemyError)

def get_versions_dir() -> Path:
    """Directory holding one JSON document per saved version"""
    return Path(settings.VERSIONS_DIR)

@router.post("/versions", status_code=status.HTTP_201_CREATED)
async def create_version(
    request: Request,
    versions_dir: Path = Depends(get_versions_dir),
    db: Session = Depends(get_db)
):
    """Save a named snapshot of guests and tables"""
    try:
        body = await request.json()
    except ValueError:
        return validation_error("Request body must be JSON")

    if not isinstance(body, dict):
        body = {}
    guests, tables = body.get("guests"), body.get("tables")
    logger.info(
        f"POST /versions name={body.get('name')!r} "
        f"guests={len(guests) if isinstance(guests, list) else 0} "
        f"tables={len(tables) if isinstance(tables, list) else 0}"
    )
    if not isinstance(guests, list) or not isinstance(tables, list):
        return validation_error("Missing or invalid guests/tables")

    name = body.get("name")
    payload = {
        "name": (name.strip() if isinstance(name, str) else "") or "Unnamed version",
        "guests": guests,
        "tables": tables,
        "stageSize": body.get("stageSize"),
        "pan": body.get("pan"),
    }

    try:
        if use_sql():
            meta = VersionRepo.save_sql(db, payload)
        else:
            meta = VersionRepo.save_fs(versions_dir, payload)
    except STORAGE_ERRORS as e:
        logger.exception("POST /versions failed")
        return storage_error(str(e) or "Failed to save version", e)

    return JSONResponse(content=meta, status_code=status.HTTP_201_CREATED)

@router.get("/versions")
async def list_versions(
    versions_dir: Path = Depends(get_versions_dir),
    db: Session = Depends(get_db)
):
    """List saved versions, newest first"""
    try:
        if use_sql():
            return VersionRepo.list_sql(db)
        return VersionRepo.list_fs(versions_dir)
    except STORAGE_ERRORS as e:
        logger.exception("GET /versions failed")
        return storage_error("Failed to list versions", e)

@router.get("/versions/{version_id}")
async def get_version(
    version_id: str,
    versions_dir: Path = Depends(get_versions_dir),
    db: Session = Depends(get_db)
):
    """Full stored payload of one version"""
    try:
        if use_sql():
            version = VersionRepo.get_sql(db, version_id)
        else:
            version = VersionRepo.get_fs(versions_dir, version_id)
    except STORAGE_ERRORS as e:
        logger.exception(f"GET /versions/{version_id} failed")
        return storage_error("Failed to load version", e)

    if version is None:
        return not_found_error("Version")
    return version

@router.delete("/versions/{version_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_version(
    version_id: str,
    versions_dir: Path = Depends(get_versions_dir),
    db: Session = Depends(get_db)
):
    try:
        if use_sql():
            deleted = VersionRepo.delete_sql(db, version_id)
        else:
            deleted = VersionRepo.delete_fs(versions_dir, version_id)
    except STORAGE_ERRORS as e:
        logger.exception(f"DELETE /versions/{version_id} failed")
        return storage_error("Failed to delete version", e)

    if not deleted:
        return not_found_error("Version")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
