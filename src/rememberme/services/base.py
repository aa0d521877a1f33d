"""BaseService — shared plumbing for services that read the contact snapshot.

Every service receives the :class:`ContactStore` and the settings in effect.
Snapshot failures are turned into error results here so individual
operations only deal with valid records.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from rememberme.infrastructure.store import SnapshotError
from rememberme.services.result import ServiceResult

if TYPE_CHECKING:
    from rememberme.config.settings import RememberSettings
    from rememberme.domain.contacts import ContactRecord
    from rememberme.infrastructure.store import ContactStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class GardenService(BaseService):
            def layout(self) -> ServiceResult:
                records, failed = self._snapshot("garden_layout")
                if failed:
                    return failed
                ...
    """

    def __init__(self, store: ContactStore, settings: RememberSettings) -> None:
        self._store = store
        self._settings = settings

    def _snapshot(self, op: str) -> tuple[list[ContactRecord], ServiceResult | None]:
        """Return ``(records, None)`` or ``([], error_result)``."""
        try:
            return self._store.records, None
        except SnapshotError as exc:
            logger.debug("Snapshot load failed for %s: %s", op, exc.message)
            return [], ServiceResult.failure(op, exc.code, exc.message, path=str(exc.path))

    @property
    def _snapshot_warnings(self) -> list[str]:
        return list(self._store.warnings)

    @staticmethod
    def _reference_time(as_of: datetime | None) -> datetime:
        return as_of or datetime.now(UTC)
