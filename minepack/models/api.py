"""
API 数据模型

定义 Modrinth API 相关的数据类，包括项目信息、搜索结果、版本信息等。
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict


@dataclass
class ProjectInfo:
    """
    项目信息。
    """

    id: str
    slug: str
    title: str
    description: str
    project_type: str
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    client_side: Optional[str] = None
    server_side: Optional[str] = None
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        """
        将 Modrinth API 返回的项目信息转换为 ProjectInfo 对象。
        """
        return cls(
            id=data["id"],
            slug=data.get("slug") or data["id"],
            title=data.get("title") or data.get("slug") or data["id"],
            description=data.get("description", ""),
            project_type=data.get("project_type", ""),
            game_versions=data.get("game_versions") or [],
            loaders=data.get("loaders") or [],
            client_side=data.get("client_side"),
            server_side=data.get("server_side"),
            versions=data.get("versions") or [],
        )


@dataclass
class SearchHit:
    """搜索结果条目"""

    project_id: str
    slug: str
    title: str
    description: str
    project_type: str
    author: str = ""
    downloads: int = 0
    categories: List[str] = field(default_factory=list)
    versions: List[str] = field(default_factory=list)

    @property
    def page_url(self) -> str:
        return f"https://modrinth.com/{self.project_type or 'mod'}/{self.slug}"

    @classmethod
    def from_modrinth(cls, data: dict) -> "SearchHit":
        return cls(
            project_id=data["project_id"],
            slug=data.get("slug") or data["project_id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            project_type=data.get("project_type", ""),
            author=data.get("author", ""),
            downloads=data.get("downloads", 0),
            categories=data.get("categories") or [],
            versions=data.get("versions") or [],
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int
    hashes: Dict[str, str] = field(default_factory=dict)
    primary: bool = False


@dataclass
class DependencyInfo:
    """依赖信息"""

    project_id: Optional[str]
    dependency_type: str  # required, optional, incompatible, embedded


@dataclass
class VersionInfo:
    """
    项目版本信息。
    """

    id: str
    name: str
    version: str
    loaders: List[str]
    game_versions: List[str]
    files: List[FileInfo]
    dependencies: List[DependencyInfo]
    client_side: Optional[str] = None
    server_side: Optional[str] = None

    @property
    def required_dependencies(self) -> List[str]:
        """必需依赖的项目 ID（保持顺序，去重）"""
        ids = [
            dep.project_id
            for dep in self.dependencies
            if dep.dependency_type == "required" and dep.project_id
        ]
        return list(dict.fromkeys(ids))

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                size=file.get("size", 0),
                hashes=file.get("hashes") or {},
                primary=bool(file.get("primary", False)),
            )
            for file in data.get("files", [])
        ]

        dependencies = [
            DependencyInfo(
                project_id=dep.get("project_id"),
                dependency_type=dep.get("dependency_type", "required"),
            )
            for dep in data.get("dependencies", [])
        ]

        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            version=data.get("version_number", ""),
            files=files,
            loaders=data.get("loaders", []),
            game_versions=data.get("game_versions", []),
            dependencies=dependencies,
            client_side=data.get("client_side"),
            server_side=data.get("server_side"),
        )
