import logging
from typing import Dict, Optional

from ..catalog.logic import Catalog
from ..common.results import ActionResult, Reason
from .models import EconomyState

logger = logging.getLogger(__name__)


class Economy:
    """金币、经验等级与库存。所有计数保持非负"""

    def __init__(self, catalog: Catalog, state: Optional[EconomyState] = None, unknown_item_value: int = 1):
        self.catalog = catalog
        self.state = state or EconomyState()
        self.unknown_item_value = unknown_item_value

    # ========== 金币 ==========

    def can_afford(self, amount: int) -> bool:
        return self.state.currency >= amount

    def debit(self, amount: int) -> bool:
        """扣款；余额不足时不做任何修改并返回 False"""
        if amount < 0 or self.state.currency < amount:
            return False
        self.state.currency -= amount
        self.state.statistics.totalSpent += amount
        return True

    def credit(self, amount: int):
        if amount < 0:
            raise ValueError("入账金额不能为负")
        self.state.currency += amount

    # ========== 经验与等级 ==========

    def threshold(self, level: Optional[int] = None) -> int:
        return self.catalog.threshold(self.state.level if level is None else level)

    def add_xp(self, amount: int) -> int:
        """增加经验并连续结算升级，返回本次提升的等级数"""
        if amount < 0:
            raise ValueError("经验不能为负")
        xp = self.state.xp + amount
        level = self.state.level
        while xp >= self.catalog.threshold(level):
            xp -= self.catalog.threshold(level)
            level += 1
        gained = level - self.state.level
        self.state.xp = xp
        self.state.level = level
        if gained:
            logger.info("level up: %d -> %d", level - gained, level)
        return gained

    # ========== 库存 ==========

    @staticmethod
    def _add(bag: Dict[str, int], key: str, qty: int):
        bag[key] = bag.get(key, 0) + qty

    @staticmethod
    def _take(bag: Dict[str, int], key: str, qty: int) -> bool:
        if qty <= 0 or bag.get(key, 0) < qty:
            return False
        bag[key] -= qty
        return True

    def count(self, item_id: str) -> int:
        return self.state.inventory.get(item_id, 0)

    def seed_count(self, crop_id: str) -> int:
        return self.state.seedInventory.get(crop_id, 0)

    def material_count(self, material_id: str) -> int:
        return self.state.materialInventory.get(material_id, 0)

    def add_item(self, item_id: str, qty: int = 1):
        self._add(self.state.inventory, item_id, qty)

    def take_seed(self, crop_id: str) -> bool:
        return self._take(self.state.seedInventory, crop_id, 1)

    def has_materials(self, requirements: Dict[str, int]) -> bool:
        return all(self.material_count(m) >= q for m, q in requirements.items())

    def take_materials(self, requirements: Dict[str, int]) -> bool:
        """按需求扣除建材，不足时不扣任何一项"""
        if not self.has_materials(requirements):
            return False
        for mat_id, qty in requirements.items():
            self.state.materialInventory[mat_id] -= qty
        return True

    # ========== 买卖 ==========

    def resolved_value(self, item_id: str) -> int:
        return self.catalog.resolved_value(item_id, fallback=self.unknown_item_value)

    def sell(self, item_id: str, qty: int = 1) -> ActionResult:
        if qty < 1:
            return ActionResult.fail(Reason.INVALID_QUANTITY, "出售数量必须大于0")
        if self.count(item_id) < qty:
            return ActionResult.fail(Reason.INSUFFICIENT_ITEMS, "物品数量不足", item_id=item_id)
        price = self.resolved_value(item_id)
        total = price * qty
        self._take(self.state.inventory, item_id, qty)
        self.credit(total)
        self.state.statistics.totalIncome += total
        item = self.catalog.item(item_id)
        name = item.name if item else item_id
        return ActionResult.success(
            f"出售了{qty}个{name}，获得{total}金币",
            item_id=item_id, quantity=qty, price_per_unit=price, total_price=total,
        )

    def buy_seed(self, crop_id: str, qty: int = 1) -> ActionResult:
        crop = self.catalog.crop(crop_id)
        if not crop:
            return ActionResult.fail(Reason.UNKNOWN_ITEM, "没有该种子可购买", item_id=crop_id)
        if qty < 1:
            return ActionResult.fail(Reason.INVALID_QUANTITY, "购买数量必须大于0")
        price = crop.buyCost * qty
        if not self.debit(price):
            return ActionResult.fail(Reason.INSUFFICIENT_FUNDS, "金币不足", cost=price)
        self._add(self.state.seedInventory, crop_id, qty)
        return ActionResult.success(f"购买了{qty}个{crop.name}种子", item_id=crop_id, quantity=qty, cost=price)

    def buy_material(self, material_id: str, qty: int = 1) -> ActionResult:
        material = self.catalog.material(material_id)
        if not material:
            return ActionResult.fail(Reason.UNKNOWN_ITEM, "没有该建材可购买", item_id=material_id)
        if qty < 1:
            return ActionResult.fail(Reason.INVALID_QUANTITY, "购买数量必须大于0")
        price = material.buyCost * qty
        if not self.debit(price):
            return ActionResult.fail(Reason.INSUFFICIENT_FUNDS, "金币不足", cost=price)
        self._add(self.state.materialInventory, material_id, qty)
        return ActionResult.success(f"购买了{qty}个{material.name}", item_id=material_id, quantity=qty, cost=price)
