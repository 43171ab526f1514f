"""
整合包项目

项目根目录以 pack.mp.json 的存在为唯一判定标准。
"""

import json
from pathlib import Path
from typing import List, Union

from loguru import logger

from minepack.exceptions import NotAProjectError, PackDescriptorError, ProjectError
from minepack.models import PackDescriptor, Stub
from minepack.storage.stub_store import StubStore
from minepack.utils import read_json, write_json

PACK_FILE = "pack.mp.json"
OVERRIDES_DIR = "overrides"


class Pack:
    """整合包项目（描述文件 + 存根集合）"""

    def __init__(self, root: Union[str, Path], descriptor: PackDescriptor):
        self.root = Path(root)
        self.descriptor = descriptor
        self.store = StubStore(self.root)

    @property
    def descriptor_path(self) -> Path:
        return self.root / PACK_FILE

    @property
    def overrides_dir(self) -> Path:
        return self.root / OVERRIDES_DIR

    @property
    def game_version(self) -> str:
        return self.descriptor.game_version

    @property
    def loader(self) -> str:
        return self.descriptor.modloader.name.value

    @staticmethod
    def is_project(root: Union[str, Path]) -> bool:
        return (Path(root) / PACK_FILE).is_file()

    @classmethod
    async def load(cls, root: Union[str, Path]) -> "Pack":
        """
        读取项目

        Raises:
            NotAProjectError: 目录中没有 pack.mp.json
            PackDescriptorError: pack.mp.json 无法解析
        """
        root = Path(root)
        path = root / PACK_FILE
        if not path.is_file():
            raise NotAProjectError(
                f"{root} 不是 minepack 项目（缺少 {PACK_FILE}）",
                context={"root": str(root)},
            )

        try:
            data = await read_json(path)
        except UnicodeDecodeError as e:
            raise PackDescriptorError(
                f"{PACK_FILE} 不是 UTF-8 文本: {e}", context={"path": str(path)}
            ) from e
        except json.JSONDecodeError as e:
            raise PackDescriptorError(
                f"{PACK_FILE} 不是有效的 JSON: {e}", context={"path": str(path)}
            ) from e

        return cls(root, PackDescriptor.from_dict(data))

    @classmethod
    async def create(
        cls,
        root: Union[str, Path],
        descriptor: PackDescriptor,
        force: bool = False,
    ) -> "Pack":
        """
        初始化项目

        已存在有效的 pack.mp.json 时拒绝覆盖，除非 force 为 True。
        """
        root = Path(root)
        if cls.is_project(root) and not force:
            try:
                await cls.load(root)
            except PackDescriptorError:
                logger.warning(f"已有的 {PACK_FILE} 无效，将被覆盖")
            else:
                raise ProjectError(
                    f"{root} 中已存在 minepack 项目", context={"root": str(root)}
                )

        root.mkdir(parents=True, exist_ok=True)
        pack = cls(root, descriptor)
        await pack.save_descriptor()
        pack.store.directory.mkdir(exist_ok=True)
        pack.overrides_dir.mkdir(exist_ok=True)
        logger.success(f"已创建 {pack.descriptor_path}")
        return pack

    async def save_descriptor(self) -> None:
        await write_json(self.descriptor_path, self.descriptor.to_dict())

    async def stubs(self) -> List[Stub]:
        return await self.store.load_all()
