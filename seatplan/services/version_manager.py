"""
Saving, loading, exporting and importing plan versions
"""

import logging
from typing import List, Optional, Set, Tuple, Union

import httpx

from seatplan.schemas.plan import ExportDocument, SavedVersion, VersionMeta
from seatplan.services.export_service import ExportFile, ExportService
from seatplan.services.interaction import InteractionController
from seatplan.services.local_store import LocalVersionStore
from seatplan.services.notifications import Notifier
from seatplan.services.seating_service import SeatingService
from seatplan.services.versions_client import VersionsClient, error_message
from seatplan.utils.ids import uid
from seatplan.utils.timestamps import format_saved_at, utc_now

logger = logging.getLogger(__name__)

SERVER = "server"
LOCAL = "local"

class VersionManager:
    """Persistence adapter between the editor and the version stores.

    Each action (save, and load/delete/export of a given version) runs at most
    once at a time; a repeated request while one is in flight is ignored.
    Loads are sequenced: a load finishing after a newer one was started is
    dropped so it cannot overwrite the newer plan. Failures are reported
    through the notifier and leave the current plan untouched.
    """

    def __init__(
        self,
        controller: InteractionController,
        client: VersionsClient,
        local_store: LocalVersionStore,
        notifier: Optional[Notifier] = None,
        destination: str = SERVER,
        viewport_width: Optional[float] = None
    ):
        self.controller = controller
        self.client = client
        self.local_store = local_store
        self.notifier = notifier or Notifier()
        self.destination = destination
        self.viewport_width = viewport_width
        self.server_versions: List[VersionMeta] = []
        self.server_versions_loading = True
        self._in_flight: Set[Tuple[str, Optional[str]]] = set()
        self._load_token = 0

    # -------- Bookkeeping --------

    def is_busy(self, action: str, key: Optional[str] = None) -> bool:
        return (action, key) in self._in_flight

    def _begin(self, action: str, key: Optional[str] = None) -> bool:
        if (action, key) in self._in_flight:
            logger.info(f"Ignoring {action} {key or ''}: already in progress")
            return False
        self._in_flight.add((action, key))
        return True

    def _end(self, action: str, key: Optional[str] = None) -> None:
        self._in_flight.discard((action, key))

    def _next_load_token(self) -> int:
        self._load_token += 1
        return self._load_token

    def _fail(self, title: str, description: str) -> None:
        self.notifier.toast(title, description, variant="destructive")

    def _apply(self, version: Union[SavedVersion, ExportDocument]) -> None:
        plan = SeatingService.apply_snapshot(
            self.controller.plan,
            version.guests,
            version.tables,
            version.stage_size,
            version.pan,
            self.viewport_width
        )
        self.controller.replace_plan(plan)

    @property
    def local_versions(self) -> List[SavedVersion]:
        return self.local_store.list()

    # -------- Server versions --------

    async def refresh_server_versions(self) -> List[VersionMeta]:
        try:
            versions = await self.client.list_versions()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch server versions: {e}")
            return []
        finally:
            self.server_versions_loading = False
        self.server_versions = versions
        return versions

    async def save_current_version(self, name: str = "") -> Optional[Union[VersionMeta, SavedVersion]]:
        """Save the current plan to the selected destination"""
        trimmed = name.strip() or f"Version {len(self.server_versions) + len(self.local_versions) + 1}"
        if self.destination == LOCAL:
            return self._save_local(trimmed)

        if not self._begin("save"):
            return None
        try:
            meta = await self.client.save_version(trimmed, self.controller.plan)
            await self.refresh_server_versions()
        except httpx.HTTPStatusError as e:
            logger.error(f"Save failed: {e.response.status_code} {e.response.text}")
            self._fail("Failed to save", error_message(e, "Server error. Check logs for details."))
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Save error: {e}")
            self._fail("Failed to save", "Network error. Make sure the server is running.")
            return None
        finally:
            self._end("save")

        self.notifier.toast("Version saved", f'"{trimmed}" saved to server successfully.')
        return meta

    def _save_local(self, name: str) -> Optional[SavedVersion]:
        plan = self.controller.plan
        version = SavedVersion(
            id=uid("v"),
            name=name,
            saved_at=format_saved_at(utc_now()),
            guests=plan.guests,
            tables=plan.tables,
            stage_size=plan.stage_size,
            pan=plan.pan
        )
        try:
            self.local_store.add(version)
        except OSError:
            self._fail("Failed to save", "Could not write to local storage.")
            return None
        self.notifier.toast("Version saved", f'"{name}" saved on this device.')
        return version

    async def load_server_version(self, version_id: str, announce: str = "Version loaded") -> bool:
        if not self._begin("load", version_id):
            return False
        token = self._next_load_token()
        try:
            version = await self.client.get_version(version_id)
        except httpx.HTTPError as e:
            logger.error(f"Load error: {e}")
            if token == self._load_token:
                self._fail("Failed to load", "Version not found or server error.")
            return False
        except ValueError as e:
            logger.error(f"Version {version_id} has invalid data: {e}")
            if token == self._load_token:
                self._fail("Failed to load", "Version data is invalid.")
            return False
        finally:
            self._end("load", version_id)

        if token != self._load_token:
            logger.info(f"Discarding stale load of version {version_id}")
            return False
        if version is None:
            self._fail("Failed to load", "Version not found or server error.")
            return False

        self._apply(version)
        self.notifier.toast(announce, f'"{version.name}" loaded successfully.')
        return True

    async def load_latest_server_version(self) -> bool:
        """Load the newest server version, keeping the current plan if there is none"""
        versions = await self.refresh_server_versions()
        if not versions:
            return False
        return await self.load_server_version(versions[0].id, announce="Loaded latest version")

    async def delete_server_version(self, version_id: str) -> bool:
        if not self._begin("delete", version_id):
            return False
        try:
            deleted = await self.client.delete_version(version_id)
            if deleted:
                await self.refresh_server_versions()
        except httpx.HTTPError as e:
            logger.error(f"Delete error: {e}")
            self._fail("Failed to delete", "Server error. Check logs for details.")
            return False
        finally:
            self._end("delete", version_id)

        if not deleted:
            self._fail("Failed to delete", "Version not found.")
            return False
        self.notifier.toast("Version deleted", "Version removed from server.")
        return True

    # -------- Local versions --------

    def load_local_version(self, version_id: str) -> bool:
        version = self.local_store.get(version_id)
        if version is None:
            return False
        self._next_load_token()
        self._apply(version)
        return True

    def delete_local_version(self, version_id: str) -> bool:
        try:
            return self.local_store.delete(version_id)
        except OSError:
            self._fail("Failed to delete", "Could not write to local storage.")
            return False

    # -------- Files --------

    async def export_version(self, version_id: str, is_server: bool) -> Optional[ExportFile]:
        """Plan file for a saved version, fetched from the server if needed"""
        if not is_server:
            version = self.local_store.get(version_id)
            if version is None:
                self._fail("Failed to export", "Could not find version data.")
                return None
            return self._export(version)

        if not self._begin("export", version_id):
            return None
        try:
            version = await self.client.get_version(version_id)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Export error: {e}")
            self._fail("Failed to export", "Could not fetch version data.")
            return None
        finally:
            self._end("export", version_id)

        if version is None:
            self._fail("Failed to export", "Could not fetch version data.")
            return None
        return self._export(version)

    def _export(self, version: SavedVersion) -> Optional[ExportFile]:
        try:
            exported = ExportService.export_version(version)
        except ValueError as e:
            logger.error(f"Export error for version {version.id}: {e}")
            self._fail("Failed to export", "Error exporting version.")
            return None
        self.notifier.toast("Version exported", f'"{version.name}" exported successfully.')
        return exported

    def import_file(self, text: Union[str, bytes]) -> bool:
        """Load a plan file; invalid files leave the plan untouched"""
        try:
            document = ExportService.parse_import(text)
        except ValueError as e:
            logger.error(f"Import error: {e}")
            self._fail("Failed to import", str(e) or "Invalid file format.")
            return False

        self._next_load_token()
        self._apply(document)
        self.notifier.toast("Version imported", f'"{document.name or "Imported version"}" loaded successfully.')
        return True

    def export_csv(self) -> ExportFile:
        return ExportService.export_csv(self.controller.plan)

    def export_xlsx(self) -> ExportFile:
        return ExportService.export_xlsx(self.controller.plan)
