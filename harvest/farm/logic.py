import logging
from typing import Iterable, List, Optional

from ..catalog.logic import Catalog
from ..catalog.models import CropDef
from ..common.results import ActionResult, Reason
from ..economy.logic import Economy
from .models import PlotSlot, PlotStatus

logger = logging.getLogger(__name__)


def required_seconds(crop: CropDef, watered: bool) -> float:
    """浇过水的作物生长时间减半"""
    return crop.growthSeconds / 2 if watered else crop.growthSeconds


def elapsed(now: float, since: float) -> float:
    return max(0.0, now - since)


class PlotField:
    """
    农田：固定数量的地块，前 initial 块开放，其余预先分配但上锁

    成熟度始终由 plantedAt 与当前时间现算，不依赖任何计时器
    """

    def __init__(self, catalog: Catalog, economy: Economy, plots: Iterable[PlotSlot], unlock_cost: int = 200):
        self.catalog = catalog
        self.economy = economy
        self.plots: List[PlotSlot] = list(plots)
        self.unlock_cost = unlock_cost

    @staticmethod
    def create_plots(initial: int, maximum: int) -> List[PlotSlot]:
        return [PlotSlot(id=i, unlocked=i < initial) for i in range(maximum)]

    def get(self, plot_id: int) -> Optional[PlotSlot]:
        if isinstance(plot_id, int) and 0 <= plot_id < len(self.plots):
            return self.plots[plot_id]
        return None

    # ========== 成熟度查询 ==========

    def _crop_of(self, plot: PlotSlot) -> Optional[CropDef]:
        return self.catalog.crop(plot.cropId) if plot.cropId else None

    def is_ready(self, plot: PlotSlot, now: float) -> bool:
        crop = self._crop_of(plot)
        if not crop or plot.plantedAt is None:
            return False
        return now - plot.plantedAt >= required_seconds(crop, plot.watered)

    def progress(self, plot: PlotSlot, now: float) -> float:
        crop = self._crop_of(plot)
        if not crop or plot.plantedAt is None:
            return 0.0
        return min(1.0, elapsed(now, plot.plantedAt) / required_seconds(crop, plot.watered))

    def remaining_seconds(self, plot: PlotSlot, now: float) -> float:
        crop = self._crop_of(plot)
        if not crop or plot.plantedAt is None:
            return 0.0
        return max(0.0, required_seconds(crop, plot.watered) - elapsed(now, plot.plantedAt))

    def status(self, now: float) -> List[PlotStatus]:
        out = []
        for plot in self.plots:
            crop = self._crop_of(plot)
            out.append(PlotStatus(
                id=plot.id,
                unlocked=plot.unlocked,
                cropId=plot.cropId,
                cropName=crop.name if crop else None,
                icon=crop.icon if crop else None,
                watered=plot.watered,
                progress=self.progress(plot, now),
                remainingSeconds=self.remaining_seconds(plot, now),
                ready=self.is_ready(plot, now),
            ))
        return out

    def ready_plots(self, now: float) -> List[PlotSlot]:
        return [p for p in self.plots if self.is_ready(p, now)]

    # ========== 操作 ==========

    def unlock(self, plot_id: int) -> ActionResult:
        plot = self.get(plot_id)
        if plot is None:
            return ActionResult.fail(Reason.UNKNOWN_SLOT, '地块索引无效', plot_id=plot_id)
        if plot.unlocked:
            return ActionResult.fail(Reason.ALREADY_UNLOCKED, '地块已开放', plot_id=plot_id)
        if not self.economy.debit(self.unlock_cost):
            return ActionResult.fail(Reason.INSUFFICIENT_FUNDS, f'开垦需要 {self.unlock_cost} 金币',
                                     plot_id=plot_id, cost=self.unlock_cost)
        plot.unlocked = True
        return ActionResult.success(f'开垦了地块{plot_id + 1}', plot_id=plot_id, cost=self.unlock_cost)

    def plant(self, plot_id: int, crop_id: str, now: float) -> ActionResult:
        plot = self.get(plot_id)
        if plot is None:
            return ActionResult.fail(Reason.UNKNOWN_SLOT, '地块索引无效', plot_id=plot_id)
        crop = self.catalog.crop(crop_id)
        if crop is None:
            return ActionResult.fail(Reason.UNKNOWN_ITEM, '没有该作物', item_id=crop_id)
        if not plot.unlocked:
            return ActionResult.fail(Reason.LOCKED, '地块尚未开放', plot_id=plot_id)
        if plot.cropId is not None:
            return ActionResult.fail(Reason.OCCUPIED, '地块已被占用', plot_id=plot_id)
        if self.economy.state.level < crop.unlockLevel:
            return ActionResult.fail(Reason.LEVEL_TOO_LOW, f'{crop.name}需要{crop.unlockLevel}级',
                                     plot_id=plot_id, required_level=crop.unlockLevel)
        if not self.economy.take_seed(crop_id):
            return ActionResult.fail(Reason.NO_SEEDS, '没有该种子', plot_id=plot_id, item_id=crop_id)
        plot.cropId = crop_id
        plot.plantedAt = now
        plot.watered = False
        return ActionResult.success(f'在地块{plot_id + 1}种植了{crop.name}', plot_id=plot_id, item_id=crop_id)

    def water(self, plot_id: int) -> ActionResult:
        plot = self.get(plot_id)
        if plot is None:
            return ActionResult.fail(Reason.UNKNOWN_SLOT, '地块索引无效', plot_id=plot_id)
        if not plot.planted:
            return ActionResult.fail(Reason.NOT_PLANTED, '该地块为空', plot_id=plot_id)
        if plot.watered:
            return ActionResult.fail(Reason.ALREADY_WATERED, '已经浇过水了', plot_id=plot_id)
        plot.watered = True
        return ActionResult.success(f'给地块{plot_id + 1}浇水', plot_id=plot_id)

    def harvest(self, plot_id: int, now: float) -> ActionResult:
        plot = self.get(plot_id)
        if plot is None:
            return ActionResult.fail(Reason.UNKNOWN_SLOT, '地块索引无效', plot_id=plot_id)
        if not plot.planted:
            return ActionResult.fail(Reason.NOT_PLANTED, '该地块为空', plot_id=plot_id)
        if not self.is_ready(plot, now):
            return ActionResult.fail(Reason.NOT_READY, '作物尚未成熟', plot_id=plot_id,
                                     remaining=self.remaining_seconds(plot, now))
        crop = self._crop_of(plot)
        self.economy.add_item(crop.id)
        self.economy.state.statistics.totalHarvested += 1
        levels = self.economy.add_xp(crop.harvestXp)
        plot.clear()
        return ActionResult.success(
            f'从地块{plot_id + 1}收获了{crop.name}',
            plot_id=plot_id, item_id=crop.id, xp=crop.harvestXp, levels_gained=levels,
        )

    def harvest_all(self, now: float) -> List[ActionResult]:
        return [self.harvest(p.id, now) for p in self.ready_plots(now)]
