from pydantic import BaseModel, Field
from typing import Dict, Optional


class BuildStatus(BaseModel):
    tier: int = 0
    name: Optional[str] = None
    maxTier: int = 0
    nextTier: Optional[int] = None
    nextName: Optional[str] = None
    nextCost: Optional[int] = None
    nextMaterials: Dict[str, int] = Field(default_factory=dict)
    missingMaterials: Dict[str, int] = Field(default_factory=dict)
