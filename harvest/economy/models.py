from pydantic import BaseModel, Field
from typing import Dict


class Statistics(BaseModel):
    totalHarvested: int = 0
    totalCollected: int = 0
    totalIncome: int = 0
    totalSpent: int = 0


class EconomyState(BaseModel):
    currency: int = Field(default=50, ge=0)
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    inventory: Dict[str, int] = Field(default_factory=dict)         # 收获物/动物产物
    seedInventory: Dict[str, int] = Field(default_factory=dict)     # 种子
    materialInventory: Dict[str, int] = Field(default_factory=dict) # 建材
    statistics: Statistics = Field(default_factory=Statistics)
