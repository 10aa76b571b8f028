import logging
from typing import Iterable, List, Optional

from ..catalog.logic import Catalog
from ..catalog.models import AnimalDef
from ..common.results import ActionResult, Reason
from ..economy.logic import Economy
from .models import AnimalInstance, AnimalStatus

logger = logging.getLogger(__name__)


class AnimalPen:
    """
    牧场

    收取即重置：产出计时从收取时刻重新开始，晚收不会累积额外产出
    """

    def __init__(self, catalog: Catalog, economy: Economy, animals: Iterable[AnimalInstance] = ()):
        self.catalog = catalog
        self.economy = economy
        self.animals: List[AnimalInstance] = list(animals)

    def get(self, animal_id: int) -> Optional[AnimalInstance]:
        return next((a for a in self.animals if a.id == animal_id), None)

    def _def_of(self, animal: AnimalInstance) -> Optional[AnimalDef]:
        return self.catalog.animal(animal.animalTypeId)

    def is_ready(self, animal: AnimalInstance, now: float) -> bool:
        data = self._def_of(animal)
        if not data:
            return False
        return now - animal.lastCollectedAt >= data.productionSeconds

    def progress(self, animal: AnimalInstance, now: float) -> float:
        data = self._def_of(animal)
        if not data:
            return 0.0
        return min(1.0, max(0.0, now - animal.lastCollectedAt) / data.productionSeconds)

    def remaining_seconds(self, animal: AnimalInstance, now: float) -> float:
        data = self._def_of(animal)
        if not data:
            return 0.0
        return max(0.0, data.productionSeconds - (now - animal.lastCollectedAt))

    def status(self, now: float) -> List[AnimalStatus]:
        out = []
        for animal in self.animals:
            data = self._def_of(animal)
            if not data:
                continue
            out.append(AnimalStatus(
                id=animal.id,
                animalTypeId=animal.animalTypeId,
                name=data.name,
                icon=data.icon,
                producedIcon=data.producedIcon,
                progress=self.progress(animal, now),
                remainingSeconds=self.remaining_seconds(animal, now),
                ready=self.is_ready(animal, now),
            ))
        return out

    def buy(self, animal_type_id: str, now: float) -> ActionResult:
        data = self.catalog.animal(animal_type_id)
        if not data:
            return ActionResult.fail(Reason.UNKNOWN_ITEM, '没有该动物', item_id=animal_type_id)
        if not self.economy.debit(data.buyCost):
            return ActionResult.fail(Reason.INSUFFICIENT_FUNDS, '金币不足', cost=data.buyCost)
        new_id = max((a.id for a in self.animals), default=-1) + 1
        self.animals.append(AnimalInstance(id=new_id, animalTypeId=animal_type_id, lastCollectedAt=now))
        return ActionResult.success(f'购买了{data.name}', animal_id=new_id, item_id=animal_type_id, cost=data.buyCost)

    def collect(self, animal_id: int, now: float) -> ActionResult:
        animal = self.get(animal_id)
        data = self._def_of(animal) if animal else None
        if not animal or not data:
            return ActionResult.fail(Reason.UNKNOWN_ANIMAL, '没有该动物', animal_id=animal_id)
        if not self.is_ready(animal, now):
            return ActionResult.fail(Reason.NOT_READY, f'{data.name}还没有产出', animal_id=animal_id,
                                     remaining=self.remaining_seconds(animal, now))
        self.economy.add_item(data.producedItemId)
        self.economy.state.statistics.totalCollected += 1
        levels = self.economy.add_xp(data.collectXp)
        animal.lastCollectedAt = now
        return ActionResult.success(
            f'从{data.name}收取了{data.producedName}',
            animal_id=animal_id, item_id=data.producedItemId, xp=data.collectXp, levels_gained=levels,
        )

    def collect_all(self, now: float) -> List[ActionResult]:
        return [self.collect(a.id, now) for a in self.animals if self.is_ready(a, now)]
