from pydantic import BaseModel
from typing import Optional


class PlotSlot(BaseModel):
    id: int
    cropId: Optional[str] = None
    plantedAt: Optional[float] = None   # 播种时间戳（秒）
    watered: bool = False
    unlocked: bool = False

    @property
    def planted(self) -> bool:
        return self.cropId is not None and self.plantedAt is not None

    def clear(self):
        self.cropId = None
        self.plantedAt = None
        self.watered = False


class PlotStatus(BaseModel):
    """地块查询视图"""
    id: int
    unlocked: bool
    cropId: Optional[str] = None
    cropName: Optional[str] = None
    icon: Optional[str] = None
    watered: bool = False
    progress: float = 0.0
    remainingSeconds: float = 0.0
    ready: bool = False
