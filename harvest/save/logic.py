import logging
from typing import Optional

from ..common.data_manager import DataError, DataManager
from .models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    存档网关

    读写失败只记录日志，不向引擎抛出；内存中的状态始终以引擎为准
    """

    def __init__(self, data_manager: Optional[DataManager] = None, slot: str = 'default'):
        self.dm = data_manager or DataManager()
        self.slot = slot

    @property
    def filename(self) -> str:
        return f'saves/{self.slot}.json'

    def _parse(self, raw, defaults: Optional[Snapshot]) -> Optional[Snapshot]:
        if raw is None:
            return None
        snapshot, fallen = Snapshot.from_raw(raw, defaults)
        fallen = [f for f in fallen if f != 'savedAt']
        if fallen:
            logger.warning("snapshot %s: fields reset to defaults: %s", self.slot, ", ".join(fallen))
        return snapshot

    def load(self, defaults: Optional[Snapshot] = None) -> Optional[Snapshot]:
        try:
            raw = self.dm.load_json(self.filename)
        except DataError:
            logger.exception("failed to load snapshot %s", self.slot)
            return None
        return self._parse(raw, defaults)

    def save(self, snapshot: Snapshot) -> None:
        try:
            self.dm.save_json(self.filename, snapshot.model_dump(mode='json'))
        except DataError:
            logger.exception("failed to save snapshot %s", self.slot)

    async def async_load(self, defaults: Optional[Snapshot] = None) -> Optional[Snapshot]:
        try:
            raw = await self.dm.async_load_json(self.filename)
        except DataError:
            logger.exception("failed to load snapshot %s", self.slot)
            return None
        return self._parse(raw, defaults)

    async def async_save(self, snapshot: Snapshot) -> None:
        try:
            await self.dm.async_save_json(self.filename, snapshot.model_dump(mode='json'))
        except DataError:
            logger.exception("failed to save snapshot %s", self.slot)


class NullStore:
    """不做持久化"""

    def load(self, defaults: Optional[Snapshot] = None) -> Optional[Snapshot]:
        return None

    def save(self, snapshot: Snapshot) -> None:
        pass
