from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..economy.models import Statistics
from ..farm.models import PlotSlot
from ..ranch.models import AnimalInstance


def _clean_counts(value: Any) -> Any:
    """丢弃非法的单个库存条目（非数字、负数、非整数），其余保留"""
    if not isinstance(value, dict):
        return value
    out = {}
    for key, count in value.items():
        if isinstance(count, bool) or not isinstance(count, (int, float)):
            continue
        if count < 0 or int(count) != count:
            continue
        out[str(key)] = int(count)
    return out


def _clean_entries(value: Any, model) -> Any:
    """逐条校验列表，只丢弃无法解析的条目"""
    if not isinstance(value, list):
        return value
    out = []
    for entry in value:
        try:
            out.append(model.model_validate(entry))
        except ValidationError:
            continue
    return out


class Snapshot(BaseModel):
    """可序列化的完整存档"""
    currency: int = Field(default=50, ge=0)
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    inventory: Dict[str, int] = Field(default_factory=dict)
    seedInventory: Dict[str, int] = Field(default_factory=dict)
    materialInventory: Dict[str, int] = Field(default_factory=dict)
    animals: List[AnimalInstance] = Field(default_factory=list)
    plots: List[PlotSlot] = Field(default_factory=list)
    buildTier: int = Field(default=0, ge=0)
    statistics: Statistics = Field(default_factory=Statistics)
    savedAt: Optional[float] = None

    @field_validator('inventory', 'seedInventory', 'materialInventory', mode='before')
    @classmethod
    def _drop_bad_counts(cls, v):
        return _clean_counts(v)

    @field_validator('animals', mode='before')
    @classmethod
    def _drop_bad_animals(cls, v):
        return _clean_entries(v, AnimalInstance)

    @field_validator('plots', mode='before')
    @classmethod
    def _drop_bad_plots(cls, v):
        return _clean_entries(v, PlotSlot)

    @classmethod
    def from_raw(cls, raw: Any, defaults: Optional['Snapshot'] = None) -> Tuple['Snapshot', List[str]]:
        """
        逐字段解析存档

        每个字段单独校验，缺失或非法的字段回退到 defaults 中的值，
        不影响其他字段。返回 (snapshot, 回退的字段名列表)
        """
        defaults = defaults or cls()
        if not isinstance(raw, dict):
            return defaults.model_copy(deep=True), list(cls.model_fields)
        base = defaults.model_dump()
        accepted = {}
        fallen = []
        for name in cls.model_fields:
            if name not in raw:
                fallen.append(name)
                continue
            try:
                cls.model_validate({**base, name: raw[name]})
            except ValidationError:
                fallen.append(name)
                continue
            accepted[name] = raw[name]
        return cls.model_validate({**base, **accepted}), fallen
