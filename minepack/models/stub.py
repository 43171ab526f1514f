"""
存根数据模型

存根 (Stub) 记录一个内容项（模组、资源包、光影）在注册中心中被固定到的具体版本。
磁盘上的 JSON 使用 camelCase 字段名。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from minepack.exceptions import StubParseError


class ContentType(Enum):
    """内容类型"""

    MOD = "mod"
    RESOURCEPACK = "resourcepack"
    SHADER = "shader"

    @property
    def uses_loader(self) -> bool:
        """只有模组需要匹配加载器"""
        return self is ContentType.MOD

    @property
    def folder(self) -> str:
        """导出时对应的游戏目录"""
        return _FOLDERS[self]

    @classmethod
    def from_registry(cls, project_type: Optional[str]) -> Optional["ContentType"]:
        """将注册中心的 project_type 转换为 ContentType，不支持的类型返回 None"""
        try:
            return cls(project_type)
        except ValueError:
            return None


_FOLDERS = {
    ContentType.MOD: "mods",
    ContentType.RESOURCEPACK: "resourcepacks",
    ContentType.SHADER: "shaderpacks",
}


class SideSupport(Enum):
    """客户端/服务端适用性"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_registry(cls, *values: Optional[str]) -> "SideSupport":
        """
        按顺序取第一个有效的注册中心取值

        注册中心返回 "unknown" 或缺失时继续尝试下一个值，全部无效时视为 required
        （与 mrpack 中省略 env 的含义一致）。
        """
        for value in values:
            try:
                return cls(value)
            except ValueError:
                continue
        return cls.REQUIRED


@dataclass
class Hashes:
    sha1: str = ""
    sha512: str = ""


@dataclass
class Download:
    version_id: str
    url: str
    path: str
    size: int = 0


@dataclass
class Environments:
    client: SideSupport = SideSupport.REQUIRED
    server: SideSupport = SideSupport.REQUIRED

    def side(self, name: str) -> SideSupport:
        """按名称 (client/server) 获取取值"""
        if name not in ("client", "server"):
            raise ValueError(f"未知的端: {name}")
        return getattr(self, name)


@dataclass
class Stub:
    """
    存根记录

    project_id 是持久身份；slug 和 name 可能随上游变化。
    """

    name: str
    project_id: str
    slug: str
    type: ContentType
    loader: str
    game_version: str
    hashes: Hashes
    download: Download
    environments: Environments = field(default_factory=Environments)
    dependencies: List[str] = field(default_factory=list)

    def __post_init__(self):
        # 保持顺序去重
        self.dependencies = list(dict.fromkeys(d for d in self.dependencies if d))

    def matches_identifier(self, identifier: str) -> bool:
        """依赖引用可能是 project_id 也可能是 slug"""
        return identifier == self.project_id or identifier == self.slug

    def depends_on(self, other: "Stub") -> bool:
        return any(other.matches_identifier(dep) for dep in self.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        """转换为磁盘 JSON 结构"""
        return {
            "name": self.name,
            "projectId": self.project_id,
            "slug": self.slug,
            "type": self.type.value,
            "loader": self.loader,
            "gameVersion": self.game_version,
            "hashes": {"sha1": self.hashes.sha1, "sha512": self.hashes.sha512},
            "download": {
                "versionId": self.download.version_id,
                "url": self.download.url,
                "path": self.download.path,
                "size": self.download.size,
            },
            "environments": {
                "client": self.environments.client.value,
                "server": self.environments.server.value,
            },
            "dependencies": list(self.dependencies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stub":
        """
        从磁盘 JSON 结构创建存根

        必填字段缺失或取值非法时抛出 StubParseError；
        可选字段（hashes、size、environments、dependencies）在此处补全默认值。
        """
        if not isinstance(data, dict):
            raise StubParseError("存根内容必须是 JSON 对象")

        try:
            content_type = ContentType(data["type"])
            download = data["download"]
            hashes = data.get("hashes") or {}
            environments = data.get("environments") or {}
            return cls(
                name=data["name"],
                project_id=data["projectId"],
                slug=data["slug"],
                type=content_type,
                loader=data.get("loader", ""),
                game_version=data.get("gameVersion", ""),
                hashes=Hashes(
                    sha1=hashes.get("sha1", ""),
                    sha512=hashes.get("sha512", ""),
                ),
                download=Download(
                    version_id=download["versionId"],
                    url=download["url"],
                    path=download["path"],
                    size=int(download.get("size") or 0),
                ),
                environments=Environments(
                    client=SideSupport(environments.get("client", "required")),
                    server=SideSupport(environments.get("server", "required")),
                ),
                dependencies=list(data.get("dependencies") or []),
            )
        except KeyError as e:
            raise StubParseError(f"存根缺少字段: {e.args[0]}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise StubParseError(f"存根字段取值无效: {e}") from e
