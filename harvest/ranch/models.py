from pydantic import BaseModel


class AnimalInstance(BaseModel):
    id: int
    animalTypeId: str
    lastCollectedAt: float   # 上次收取时间戳（秒），只增不减


class AnimalStatus(BaseModel):
    id: int
    animalTypeId: str
    name: str
    icon: str
    producedIcon: str
    progress: float = 0.0
    remainingSeconds: float = 0.0
    ready: bool = False
