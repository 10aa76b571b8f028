from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Reason(str, Enum):
    """操作被拒绝的原因"""
    UNKNOWN_SLOT = "unknown_slot"
    UNKNOWN_ITEM = "unknown_item"
    UNKNOWN_ANIMAL = "unknown_animal"
    ALREADY_UNLOCKED = "already_unlocked"
    LOCKED = "locked"
    OCCUPIED = "occupied"
    NO_SEEDS = "no_seeds"
    LEVEL_TOO_LOW = "level_too_low"
    NOT_PLANTED = "not_planted"
    ALREADY_WATERED = "already_watered"
    NOT_READY = "not_ready"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_ITEMS = "insufficient_items"
    INSUFFICIENT_MATERIALS = "insufficient_materials"
    INVALID_QUANTITY = "invalid_quantity"
    MAX_TIER = "max_tier"


class ActionResult(BaseModel):
    """引擎操作结果；ok=False 时状态未被修改"""
    ok: bool
    reason: Optional[Reason] = None
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "", **data) -> "ActionResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def fail(cls, reason: Reason, message: str = "", **data) -> "ActionResult":
        return cls(ok=False, reason=reason, message=message, data=data)

    def __bool__(self):
        return self.ok
