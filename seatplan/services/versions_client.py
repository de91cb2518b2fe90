"""
HTTP client for the version store API
"""

import logging
from typing import List, Optional

import httpx

from seatplan.core.config import settings
from seatplan.schemas.plan import PlanState, SavedVersion, VersionMeta

logger = logging.getLogger(__name__)

class VersionsClient:
    """Async client for ``/versions``.

    Non-2xx responses raise ``httpx.HTTPStatusError``, except 404 on a single
    version which is reported as a missing result.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "VersionsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def list_versions(self) -> List[VersionMeta]:
        response = await self._client.get("/versions")
        response.raise_for_status()
        return [VersionMeta.model_validate(item) for item in response.json()]

    async def get_version(self, version_id: str) -> Optional[SavedVersion]:
        response = await self._client.get(f"/versions/{version_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return SavedVersion.model_validate(response.json())

    async def save_version(self, name: str, plan: PlanState) -> VersionMeta:
        body = {
            "name": name,
            "guests": [g.to_json_dict() for g in plan.guests],
            "tables": [t.to_json_dict() for t in plan.tables],
            "stageSize": plan.stage_size.to_json_dict(),
            "pan": plan.pan.to_json_dict(),
        }
        response = await self._client.post("/versions", json=body)
        response.raise_for_status()
        meta = VersionMeta.model_validate(response.json())
        logger.info(f"Saved version {meta.id} ({meta.name!r})")
        return meta

    async def delete_version(self, version_id: str) -> bool:
        response = await self._client.delete(f"/versions/{version_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        response.raise_for_status()
        return True

def error_message(exc: Exception, default: str) -> str:
    """Server-provided message of a failed request, if there is one"""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            return default
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return default
