"""
整合包描述模型

对应项目根目录下的 pack.mp.json。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from minepack.exceptions import PackDescriptorError


class ModLoader(Enum):
    """模组加载器"""

    FABRIC = "fabric"
    FORGE = "forge"
    QUILT = "quilt"
    NEOFORGE = "neoforge"

    @property
    def friendly_name(self) -> str:
        return {
            ModLoader.FABRIC: "Fabric loader",
            ModLoader.FORGE: "Forge",
            ModLoader.QUILT: "Quilt loader",
            ModLoader.NEOFORGE: "NeoForge",
        }[self]


@dataclass
class Modloader:
    name: ModLoader
    version: str = ""


@dataclass
class PackDescriptor:
    """整合包元数据"""

    name: str
    author: str
    game_version: str
    modloader: Modloader
    description: str = ""
    version: str = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "author": self.author,
            "description": self.description,
            "gameVersion": self.game_version,
            "modloader": {
                "name": self.modloader.name.value,
                "version": self.modloader.version,
            },
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackDescriptor":
        if not isinstance(data, dict):
            raise PackDescriptorError("pack.mp.json 必须是 JSON 对象")

        try:
            modloader = data["modloader"]
            loader = ModLoader(str(modloader["name"]).lower())
            return cls(
                name=data["name"],
                author=data.get("author", ""),
                description=data.get("description", ""),
                game_version=data["gameVersion"],
                modloader=Modloader(name=loader, version=modloader.get("version", "")),
                version=data.get("version") or "1.0.0",
            )
        except KeyError as e:
            raise PackDescriptorError(f"pack.mp.json 缺少字段: {e.args[0]}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise PackDescriptorError(f"pack.mp.json 字段取值无效: {e}") from e
