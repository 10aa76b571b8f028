"""
数据管理器 - 使用 JSON 文件存储，提供同步和异步 (aiofiles) 两套接口

用法:
    dm = DataManager(base_path)
    dm.save_json('saves/default.json', {'currency': 50})
    data = dm.load_json('saves/default.json')

    data = await dm.async_load_json('saves/default.json')
    await dm.async_save_json('saves/default.json', data)

load 系列方法在文件不存在时返回 None；读取或解析失败时抛出 DataError，
由调用方（存档网关）决定如何处理
"""
from pathlib import Path
import json
from typing import Optional, Dict, Any

import aiofiles


class DataError(RuntimeError):
    """存储读写失败"""


class DataManager:
    def __init__(self, base_path: Optional[Path] = None):
        if base_path:
            self.root = Path(base_path)
        else:
            # 回退到当前目录下的 data
            self.root = Path.cwd() / "data"
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, filename: str) -> Path:
        p = self.root / filename
        p.parent.mkdir(parents=True, exist_ok=True)
        return p

    # ========== 同步方法 ==========
    def load_json(self, filename: str) -> Optional[Dict[str, Any]]:
        p = self.root / filename
        if not p.exists():
            return None
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DataError(f"读取 {filename} 失败: {e}") from e

    def save_json(self, filename: str, data: Dict[str, Any]):
        p = self._path(filename)
        try:
            content = json.dumps(data, ensure_ascii=False, indent=2)
            tmp = p.with_suffix(p.suffix + ".tmp")
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(p)
        except (OSError, TypeError, ValueError) as e:
            raise DataError(f"保存 {filename} 失败: {e}") from e

    # ========== 异步方法 ==========
    async def async_load_json(self, filename: str) -> Optional[Dict[str, Any]]:
        p = self.root / filename
        if not p.exists():
            return None
        try:
            async with aiofiles.open(p, 'r', encoding='utf-8') as f:
                content = await f.read()
            return json.loads(content)
        except (OSError, ValueError) as e:
            raise DataError(f"读取 {filename} 失败: {e}") from e

    async def async_save_json(self, filename: str, data: Dict[str, Any]):
        p = self._path(filename)
        try:
            content = json.dumps(data, ensure_ascii=False, indent=2)
            tmp = p.with_suffix(p.suffix + ".tmp")
            async with aiofiles.open(tmp, 'w', encoding='utf-8') as f:
                await f.write(content)
            tmp.replace(p)
        except (OSError, TypeError, ValueError) as e:
            raise DataError(f"保存 {filename} 失败: {e}") from e

    def get_data_path(self) -> Path:
        """获取数据根目录"""
        return self.root
