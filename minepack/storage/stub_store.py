"""
存根存储

每个内容项一个文件: <root>/stubs/<slug>.mp.json。
不同项目的 slug 清理后可能得到同一个文件名，此时后写入的项目改用
<slug>-<projectId>.mp.json，已有的文件不会被覆盖。
写入是整体重写（临时文件 + 原子替换），删除是单个文件删除。
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from minepack.exceptions import StubParseError, StubWriteError
from minepack.models import Stub
from minepack.utils import read_json, sanitize_filename, write_json

STUBS_DIR = "stubs"
STUB_EXT = ".mp.json"


class StubStore:
    """存根存储"""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.directory = self.root / STUBS_DIR
        # project_id -> 实际读取/写入的文件
        self._paths: Dict[str, Path] = {}

    def path_for(self, stub: Stub) -> Path:
        """存根的规范文件路径"""
        return self.directory / f"{sanitize_filename(stub.slug or stub.project_id)}{STUB_EXT}"

    def alternate_path_for(self, stub: Stub) -> Path:
        """规范路径已被其他项目占用时使用的路径"""
        name = sanitize_filename(f"{stub.slug}-{stub.project_id}")
        return self.directory / f"{name}{STUB_EXT}"

    def files(self) -> List[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(self.directory.glob(f"*{STUB_EXT}"))

    async def read(self, path: Path) -> Stub:
        """读取单个存根文件"""
        try:
            data = await read_json(path)
        except UnicodeDecodeError as e:
            raise StubParseError(
                f"存根文件不是 UTF-8 文本: {e}", context={"path": str(path)}
            ) from e
        except ValueError as e:
            raise StubParseError(
                f"存根文件不是有效的 JSON: {e}", context={"path": str(path)}
            ) from e
        except OSError as e:
            raise StubParseError(
                f"无法读取存根文件: {e}", context={"path": str(path)}
            ) from e

        stub = Stub.from_dict(data)
        self._paths[stub.project_id] = path
        return stub

    async def load_all(self) -> List[Stub]:
        """
        读取全部存根

        无法解析的文件会被跳过并记录警告，不会中断整个命令。
        """
        stubs: List[Stub] = []
        for path in self.files():
            try:
                stubs.append(await self.read(path))
            except StubParseError as e:
                logger.warning(f"跳过无效的存根文件 {path.name}: {e.message}")
        logger.debug(f"从 {self.directory} 读取了 {len(stubs)} 个存根")
        return stubs

    def _tracked_owner(self, path: Path) -> Optional[str]:
        for project_id, tracked in self._paths.items():
            if tracked == path:
                return project_id
        return None

    async def _owner(self, path: Path) -> Optional[str]:
        """文件中记录的项目 ID；文件无法解析时返回 None"""
        owner = self._tracked_owner(path)
        if owner is not None:
            return owner
        try:
            data = await read_json(path)
        except (OSError, ValueError):
            return None
        if isinstance(data, dict):
            return data.get("projectId")
        return None

    async def _target_for(self, stub: Stub) -> Path:
        path = self.path_for(stub)
        if not path.exists() or await self._owner(path) == stub.project_id:
            return path

        alternate = self.alternate_path_for(stub)
        logger.warning(
            f"{path.name} 已被其他项目使用，{stub.slug} ({stub.project_id}) 改存为 {alternate.name}"
        )
        return alternate

    async def write(self, stub: Stub) -> Path:
        """
        写入存根

        如果同一项目之前存放在另一个文件中（slug 发生变化），旧文件会被删除。
        属于其他项目的文件不会被覆盖。
        """
        path = await self._target_for(stub)
        previous = self._paths.get(stub.project_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            await write_json(path, stub.to_dict())
            if previous is not None and previous != path and previous.exists():
                os.remove(previous)
                logger.debug(f"删除旧存根文件 {previous.name}")
        except OSError as e:
            raise StubWriteError(
                f"写入存根失败: {e}", context={"path": str(path)}
            ) from e

        self._paths[stub.project_id] = path
        logger.debug(f"写入存根 {path.name}")
        return path

    def locate(self, stub: Stub) -> Optional[Path]:
        """找到存根实际所在的文件"""
        tracked = self._paths.get(stub.project_id)
        if tracked is not None and tracked.exists():
            return tracked
        for path in (self.path_for(stub), self.alternate_path_for(stub)):
            if path.exists() and self._tracked_owner(path) in (None, stub.project_id):
                return path
        return None

    async def delete(self, stub: Stub) -> Path:
        """删除存根文件"""
        path = self.locate(stub)
        if path is None:
            raise StubWriteError(
                f"存根文件不存在: {stub.slug}", context={"project_id": stub.project_id}
            )
        try:
            os.remove(path)
        except OSError as e:
            raise StubWriteError(
                f"删除存根失败: {e}", context={"path": str(path)}
            ) from e

        self._paths.pop(stub.project_id, None)
        logger.debug(f"删除存根 {path.name}")
        return path
