"""
农场引擎 - 持有全部游戏状态，对外提供离散操作

时钟、存档网关、顾问、音效反馈、通知均由构造函数注入；
引擎自身不持有计时器，成熟度由调用方轮询时现算
"""
import logging
from typing import Any, Dict, List, Optional

from .build.logic import Construction
from .catalog.logic import Catalog
from .common.clock import Clock, SystemClock
from .common.config_manager import ConfigManager
from .common.results import ActionResult
from .economy.logic import Economy
from .economy.models import EconomyState
from .farm.logic import PlotField
from .farm.models import PlotSlot
from .ranch.logic import AnimalPen
from .ranch.models import AnimalInstance
from .save.logic import NullStore
from .save.models import Snapshot
from .services.advisor import Advisor, advise_safely, fetch_advice
from .services.feedback import Feedback, FeedbackEvent, NullFeedback
from .services.notifier import Notifier

logger = logging.getLogger(__name__)


class FarmEngine:
    def __init__(self, catalog: Catalog, config: Optional[ConfigManager] = None,
                 clock: Optional[Clock] = None, store=None,
                 advisor: Optional[Advisor] = None, feedback: Optional[Feedback] = None,
                 notifier: Optional[Notifier] = None, snapshot: Optional[Snapshot] = None):
        self.catalog = catalog
        self.config = config or ConfigManager()
        self.clock = clock or SystemClock()
        self.store = store or NullStore()
        self.advisor = advisor
        self.feedback = feedback or NullFeedback()
        self.notifier = notifier
        self.notifications_enabled = False
        self._ready_seen: Dict[int, bool] = {}
        self._restore(snapshot or self.default_snapshot(self.config, self.catalog))

    # ========== 创建与恢复 ==========

    @staticmethod
    def default_snapshot(config: ConfigManager, catalog: Catalog) -> Snapshot:
        """新游戏的初始状态"""
        seeds = {crop_id: 0 for crop_id in catalog.crops}
        seeds.update({k: v for k, v in config.initial_seeds.items() if k in seeds})
        return Snapshot(
            currency=config.initial_coins,
            seedInventory=seeds,
            materialInventory={m: 0 for m in catalog.materials},
            plots=PlotField.create_plots(config.initial_plot_count, config.max_plot_count),
        )

    @classmethod
    def load(cls, catalog: Catalog, store, config: Optional[ConfigManager] = None, **kwargs) -> 'FarmEngine':
        """从存档网关恢复；没有存档时开始新游戏"""
        config = config or ConfigManager()
        snapshot = store.load(cls.default_snapshot(config, catalog))
        return cls(catalog, config=config, store=store, snapshot=snapshot, **kwargs)

    def _restore(self, snapshot: Snapshot):
        state = EconomyState(
            currency=snapshot.currency,
            xp=snapshot.xp,
            level=snapshot.level,
            inventory={k: v for k, v in snapshot.inventory.items() if v > 0},
            seedInventory=self._known(snapshot.seedInventory, self.catalog.crops, 'seed'),
            materialInventory=self._known(snapshot.materialInventory, self.catalog.materials, 'material'),
            statistics=snapshot.statistics.model_copy(),
        )
        self.economy = Economy(self.catalog, state, unknown_item_value=self.config.unknown_item_value)
        # 存档中的经验可能超过当前曲线的门槛
        self.economy.add_xp(0)
        self.field = PlotField(self.catalog, self.economy, self._repair_plots(snapshot.plots),
                               unlock_cost=self.config.plot_unlock_cost)
        self.pen = AnimalPen(self.catalog, self.economy, self._repair_animals(snapshot.animals))
        self.construction = Construction(self.catalog, self.economy, snapshot.buildTier)
        self._ready_seen = {p.id: False for p in self.field.plots}

    @staticmethod
    def _known(bag: Dict[str, int], known: dict, label: str) -> Dict[str, int]:
        out = {k: 0 for k in known}
        for key, count in bag.items():
            if key in known:
                out[key] = count
            else:
                logger.warning("dropping unknown %s %s from snapshot", label, key)
        return out

    def _repair_plots(self, saved: List[PlotSlot]) -> List[PlotSlot]:
        size = self.config.max_plot_count
        plots = PlotField.create_plots(self.config.initial_plot_count, size)
        seen = set()
        for p in saved:
            if p.id < 0 or p.id >= size:
                logger.warning("dropping plot %d outside 0..%d from snapshot", p.id, size - 1)
                continue
            if p.id in seen:
                continue
            seen.add(p.id)
            plot = p.model_copy()
            plot.unlocked = plot.unlocked or plots[p.id].unlocked
            broken = (
                (plot.cropId is None) != (plot.plantedAt is None)
                or (plot.cropId is not None and self.catalog.crop(plot.cropId) is None)
                or (plot.cropId is not None and not plot.unlocked)
            )
            if broken:
                logger.warning("clearing inconsistent plot %d from snapshot", plot.id)
                plot.clear()
            if plot.cropId is None:
                plot.watered = False
            plots[p.id] = plot
        return plots

    def _repair_animals(self, saved: List[AnimalInstance]) -> List[AnimalInstance]:
        animals = []
        ids = set()
        for a in saved:
            if a.id in ids or self.catalog.animal(a.animalTypeId) is None:
                logger.warning("dropping animal %s (%s) from snapshot", a.id, a.animalTypeId)
                continue
            ids.add(a.id)
            animals.append(a.model_copy())
        return animals

    def snapshot(self) -> Snapshot:
        state = self.economy.state
        return Snapshot(
            currency=state.currency,
            xp=state.xp,
            level=state.level,
            inventory=dict(state.inventory),
            seedInventory=dict(state.seedInventory),
            materialInventory=dict(state.materialInventory),
            animals=[a.model_copy() for a in self.pen.animals],
            plots=[p.model_copy() for p in self.field.plots],
            buildTier=self.construction.tier,
            statistics=state.statistics.model_copy(),
            savedAt=self.clock.now(),
        )

    def save(self) -> None:
        """尽力保存，失败不影响内存状态"""
        try:
            self.store.save(self.snapshot())
        except Exception:
            logger.exception("snapshot save failed")

    async def async_save(self) -> None:
        saver = getattr(self.store, 'async_save', None)
        if saver is None:
            self.save()
            return
        try:
            await saver(self.snapshot())
        except Exception:
            logger.exception("snapshot save failed")

    # ========== 内部工具 ==========

    def _emit(self, event: FeedbackEvent):
        try:
            self.feedback.emit(event)
        except Exception as e:
            logger.warning("feedback %s failed: %s", event.value, e)

    def _done(self, op: str, result: ActionResult, event: Optional[FeedbackEvent] = None) -> ActionResult:
        if result.ok:
            logger.debug("%s ok: %s", op, result.message)
            if event is not None:
                self._emit(event)
        else:
            logger.debug("%s rejected: %s", op, result.reason.value)
        return result

    @property
    def state(self) -> EconomyState:
        return self.economy.state

    # ========== 农田 ==========

    def unlock_plot(self, plot_id: int) -> ActionResult:
        return self._done('unlock', self.field.unlock(plot_id), FeedbackEvent.PURCHASE_SOUND)

    def plant(self, plot_id: int, crop_id: str) -> ActionResult:
        result = self.field.plant(plot_id, crop_id, self.clock.now())
        if result.ok:
            self._ready_seen[plot_id] = False
        return self._done('plant', result)

    def water(self, plot_id: int) -> ActionResult:
        return self._done('water', self.field.water(plot_id))

    def harvest(self, plot_id: int) -> ActionResult:
        result = self.field.harvest(plot_id, self.clock.now())
        if result.ok:
            self._ready_seen[plot_id] = False
        return self._done('harvest', result, FeedbackEvent.HARVEST_SOUND)

    def harvest_all(self) -> List[ActionResult]:
        return [self.harvest(p.id) for p in self.field.ready_plots(self.clock.now())]

    # ========== 牧场 ==========

    def buy_animal(self, animal_type_id: str) -> ActionResult:
        return self._done('buy_animal', self.pen.buy(animal_type_id, self.clock.now()), FeedbackEvent.PURCHASE_SOUND)

    def collect(self, animal_id: int) -> ActionResult:
        return self._done('collect', self.pen.collect(animal_id, self.clock.now()), FeedbackEvent.HARVEST_SOUND)

    def collect_all(self) -> List[ActionResult]:
        now = self.clock.now()
        return [self.collect(a.id) for a in self.pen.animals if self.pen.is_ready(a, now)]

    # ========== 商店 ==========

    def buy_seed(self, crop_id: str, qty: int = 1) -> ActionResult:
        return self._done('buy_seed', self.economy.buy_seed(crop_id, qty), FeedbackEvent.PURCHASE_SOUND)

    def buy_material(self, material_id: str, qty: int = 1) -> ActionResult:
        return self._done('buy_material', self.economy.buy_material(material_id, qty), FeedbackEvent.PURCHASE_SOUND)

    def sell(self, item_id: str, qty: int = 1) -> ActionResult:
        return self._done('sell', self.economy.sell(item_id, qty), FeedbackEvent.SALE_SOUND)

    # ========== 建造 ==========

    def upgrade_building(self) -> ActionResult:
        return self._done('upgrade', self.construction.upgrade(), FeedbackEvent.PURCHASE_SOUND)

    # ========== 轮询与通知 ==========

    def enable_notifications(self) -> bool:
        if self.notifier is None:
            return False
        try:
            self.notifications_enabled = bool(self.notifier.request_permission())
        except Exception as e:
            logger.warning("notification permission request failed: %s", e)
            self.notifications_enabled = False
        return self.notifications_enabled

    def poll(self, now: Optional[float] = None) -> List[int]:
        """
        重新计算所有地块的成熟度

        返回本次由"未成熟"变为"成熟"的地块 ID；每块地每次成熟只通知一次
        """
        now = self.clock.now() if now is None else now
        became_ready = []
        for plot in self.field.plots:
            ready = self.field.is_ready(plot, now)
            if ready and not self._ready_seen.get(plot.id, False):
                became_ready.append(plot.id)
            self._ready_seen[plot.id] = ready
        for plot_id in became_ready:
            self._notify(self.field.plots[plot_id])
        return became_ready

    def _notify(self, plot: PlotSlot):
        if self.notifier is None or not self.notifications_enabled:
            return
        crop = self.catalog.crop(plot.cropId)
        try:
            self.notifier.notify(crop.name, crop.icon)
        except Exception as e:
            logger.warning("notifier unavailable: %s", e)

    # ========== 查询 ==========

    def advice(self) -> str:
        state = self.economy.state
        return advise_safely(self.advisor, state.currency, state.level, state.inventory,
                             default=self.config.default_advice)

    async def async_advice(self) -> str:
        state = self.economy.state
        return await fetch_advice(self.advisor, state.currency, state.level, dict(state.inventory),
                                  timeout=self.config.advice_timeout, default=self.config.default_advice)

    def status(self, now: Optional[float] = None) -> Dict[str, Any]:
        """供渲染使用的完整视图"""
        now = self.clock.now() if now is None else now
        state = self.economy.state
        inventory = []
        for item_id, count in sorted(state.inventory.items()):
            if count <= 0:
                continue
            item = self.catalog.item(item_id)
            inventory.append({
                'id': item_id,
                'name': item.name if item else item_id,
                'icon': item.icon if item else '📦',
                'count': count,
                'value': self.economy.resolved_value(item_id),
            })
        return {
            'currency': state.currency,
            'xp': state.xp,
            'level': state.level,
            'next_level_xp': self.economy.threshold(),
            'plots': [s.model_dump() for s in self.field.status(now)],
            'next_unlock_cost': self.config.plot_unlock_cost,
            'animals': [s.model_dump() for s in self.pen.status(now)],
            'inventory': inventory,
            'seeds': [
                {'id': c.id, 'name': c.name, 'icon': c.icon, 'count': state.seedInventory.get(c.id, 0),
                 'cost': c.buyCost, 'unlockLevel': c.unlockLevel}
                for c in self.catalog.crops.values()
            ],
            'materials': dict(state.materialInventory),
            'building': self.construction.status().model_dump(),
            'statistics': state.statistics.model_dump(),
        }
