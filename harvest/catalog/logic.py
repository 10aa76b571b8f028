from pathlib import Path
import json
import logging
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .leveling import LinearCurve, make_curve
from .models import AnimalDef, BuildTierDef, CropDef, ItemDef, MaterialDef, SourceKind

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / 'data'


class CatalogError(ValueError):
    """目录配置错误，启动时抛出"""


class Catalog:
    """
    只读目录：作物、动物、建材、建筑等级

    构造时一次性完成全部校验并生成统一的物品登记表 items，
    之后任何游戏操作都不会修改目录内容
    """

    def __init__(self, crops: Iterable[CropDef], animals: Iterable[AnimalDef],
                 materials: Iterable[MaterialDef] = (), tiers: Iterable[BuildTierDef] = (),
                 threshold: Optional[Callable[[int], int]] = None):
        self._crops = self._index(list(crops), '作物')
        self._animals = self._index(list(animals), '动物')
        self._materials = self._index(list(materials), '建材')
        self._tiers: List[BuildTierDef] = sorted(tiers, key=lambda t: t.tier)
        self.threshold = threshold or LinearCurve(100)
        self._items: Dict[str, ItemDef] = {}
        self._validate()
        self._build_items()

    # ========== 加载 ==========

    @staticmethod
    def _load_json(path: Path, key: str) -> list:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise CatalogError(f"无法读取目录文件 {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise CatalogError(f"目录文件 {path.name} 的顶层必须是对象")
        return data.get(key, [])

    @classmethod
    def from_dicts(cls, crops: list, animals: list, materials: list = (), tiers: list = (),
                   threshold: Optional[Callable[[int], int]] = None) -> 'Catalog':
        try:
            return cls(
                crops=[CropDef.model_validate(c) for c in crops],
                animals=[AnimalDef.model_validate(a) for a in animals],
                materials=[MaterialDef.model_validate(m) for m in materials],
                tiers=[BuildTierDef.model_validate(t) for t in tiers],
                threshold=threshold,
            )
        except ValidationError as e:
            raise CatalogError(f"目录定义无效: {e}") from e

    @classmethod
    def from_directory(cls, path: Optional[Path] = None,
                       threshold: Optional[Callable[[int], int]] = None) -> 'Catalog':
        base = Path(path) if path else DATA_DIR
        return cls.from_dicts(
            crops=cls._load_json(base / 'crops.json', 'crops'),
            animals=cls._load_json(base / 'animals.json', 'animals'),
            materials=cls._load_json(base / 'materials.json', 'materials'),
            tiers=cls._load_json(base / 'build_tiers.json', 'tiers'),
            threshold=threshold,
        )

    @classmethod
    def from_config(cls, config, path: Optional[Path] = None) -> 'Catalog':
        """按配置中的 level_curve / xp_per_level 选择经验曲线"""
        curve = make_curve(config.level_curve, config.xp_per_level)
        return cls.from_directory(path, threshold=curve)

    # ========== 校验 ==========

    @staticmethod
    def _index(defs: list, label: str) -> dict:
        out = {}
        for d in defs:
            if d.id in out:
                raise CatalogError(f"{label}ID重复: {d.id}")
            out[d.id] = d
        return out

    def _validate(self):
        for animal in self._animals.values():
            if animal.producedItemId in self._crops:
                raise CatalogError(f"动物产物 {animal.producedItemId} 与作物ID冲突")
        produced = [a.producedItemId for a in self._animals.values()]
        if len(set(produced)) != len(produced):
            raise CatalogError("多个动物使用了相同的产物ID")
        sellable = set(self._crops) | set(produced)
        clash = sellable & set(self._materials)
        if clash:
            raise CatalogError(f"建材ID与可出售物品冲突: {sorted(clash)}")

        names = [c.name for c in self._crops.values()] + [a.producedName for a in self._animals.values()]
        dup = {n for n in names if names.count(n) > 1}
        if dup:
            raise CatalogError(f"物品名称重复: {sorted(dup)}")

        prev: Optional[BuildTierDef] = None
        for i, tier in enumerate(self._tiers, start=1):
            if tier.tier != i:
                raise CatalogError(f"建筑等级必须从1开始连续编号，缺少第{i}级")
            for mat_id, qty in tier.materials.items():
                if mat_id not in self._materials:
                    raise CatalogError(f"第{tier.tier}级引用了未知建材 {mat_id}")
                if qty <= 0:
                    raise CatalogError(f"第{tier.tier}级建材数量必须大于0")
            if prev is not None:
                if tier.cost <= prev.cost:
                    raise CatalogError(f"第{tier.tier}级费用必须高于上一级")
                for mat_id, qty in prev.materials.items():
                    if tier.materials.get(mat_id, 0) <= qty:
                        raise CatalogError(f"第{tier.tier}级 {mat_id} 需求必须高于上一级")
            prev = tier

        for level in range(1, 100):
            if self.threshold(level) <= 0 or self.threshold(level + 1) < self.threshold(level):
                raise CatalogError(f"经验曲线 {self.threshold!r} 在 {level} 级处无效")

    def _build_items(self):
        for crop in self._crops.values():
            self._items[crop.id] = ItemDef(
                id=crop.id, name=crop.name, icon=crop.icon,
                sellValue=crop.sellValue, sourceKind=SourceKind.CROP,
            )
        for animal in self._animals.values():
            self._items[animal.producedItemId] = ItemDef(
                id=animal.producedItemId, name=animal.producedName, icon=animal.producedIcon,
                sellValue=animal.producedValue, sourceKind=SourceKind.PRODUCE,
            )
        logger.debug("catalog loaded: %d crops, %d animals, %d materials, %d tiers",
                     len(self._crops), len(self._animals), len(self._materials), len(self._tiers))

    # ========== 查询 ==========

    @property
    def crops(self) -> Dict[str, CropDef]:
        return dict(self._crops)

    @property
    def animals(self) -> Dict[str, AnimalDef]:
        return dict(self._animals)

    @property
    def materials(self) -> Dict[str, MaterialDef]:
        return dict(self._materials)

    @property
    def tiers(self) -> List[BuildTierDef]:
        return list(self._tiers)

    @property
    def items(self) -> Dict[str, ItemDef]:
        return dict(self._items)

    def crop(self, crop_id: str) -> Optional[CropDef]:
        return self._crops.get(crop_id)

    def animal(self, animal_type_id: str) -> Optional[AnimalDef]:
        return self._animals.get(animal_type_id)

    def material(self, material_id: str) -> Optional[MaterialDef]:
        return self._materials.get(material_id)

    def item(self, item_id: str) -> Optional[ItemDef]:
        return self._items.get(item_id)

    def tier(self, number: int) -> Optional[BuildTierDef]:
        if 1 <= number <= len(self._tiers):
            return self._tiers[number - 1]
        return None

    @property
    def max_tier(self) -> int:
        return len(self._tiers)

    def resolved_value(self, item_id: str, fallback: int = 1) -> int:
        """出售单价：作物售价优先，其次动物产物售价，未登记的物品使用 fallback"""
        item = self._items.get(item_id)
        return item.sellValue if item else fallback
