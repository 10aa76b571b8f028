import logging

from ..catalog.logic import Catalog
from ..common.results import ActionResult, Reason
from ..economy.logic import Economy
from .models import BuildStatus

logger = logging.getLogger(__name__)


class Construction:
    """农舍建造：逐级升级，每级消耗金币和建材，完成时一次性奖励经验"""

    def __init__(self, catalog: Catalog, economy: Economy, tier: int = 0):
        self.catalog = catalog
        self.economy = economy
        self.tier = max(0, min(tier, catalog.max_tier))

    def status(self) -> BuildStatus:
        current = self.catalog.tier(self.tier)
        nxt = self.catalog.tier(self.tier + 1)
        status = BuildStatus(
            tier=self.tier,
            name=current.name if current else None,
            maxTier=self.catalog.max_tier,
        )
        if nxt:
            status.nextTier = nxt.tier
            status.nextName = nxt.name
            status.nextCost = nxt.cost
            status.nextMaterials = dict(nxt.materials)
            status.missingMaterials = {
                m: q - self.economy.material_count(m)
                for m, q in nxt.materials.items()
                if self.economy.material_count(m) < q
            }
        return status

    def upgrade(self) -> ActionResult:
        nxt = self.catalog.tier(self.tier + 1)
        if nxt is None:
            return ActionResult.fail(Reason.MAX_TIER, '已经是最高等级', tier=self.tier)
        if not self.economy.can_afford(nxt.cost):
            return ActionResult.fail(Reason.INSUFFICIENT_FUNDS, f'升级需要 {nxt.cost} 金币', cost=nxt.cost)
        if not self.economy.has_materials(nxt.materials):
            return ActionResult.fail(Reason.INSUFFICIENT_MATERIALS, '建材不足',
                                     missing=self.status().missingMaterials)
        self.economy.debit(nxt.cost)
        self.economy.take_materials(nxt.materials)
        self.tier = nxt.tier
        levels = self.economy.add_xp(nxt.xpReward)
        logger.info("building upgraded to tier %d (%s)", nxt.tier, nxt.name)
        return ActionResult.success(
            f'建造完成：{nxt.name}',
            tier=nxt.tier, cost=nxt.cost, xp=nxt.xpReward, levels_gained=levels,
        )
