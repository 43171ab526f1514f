"""
模组解析服务

把用户输入（名称、slug、项目 ID、Modrinth 页面链接或搜索词）解析为存根:
标识解析 -> 直接查找 -> 搜索回退 -> 消歧 -> 版本选择 -> 文件选择 -> 构建存根。
解析过程只访问网络，不写文件。
"""

import re
from typing import Optional

from loguru import logger

from minepack.models import (
    ContentType,
    Download,
    Environments,
    FileInfo,
    Hashes,
    ProjectInfo,
    Resolution,
    ResultKind,
    SearchHit,
    SideSupport,
    Stub,
    VersionInfo,
)
from minepack.services.api_client import ModrinthClient
from minepack.services.version_matcher import VersionMatcher, select_file

MODRINTH_URL_PATTERN = re.compile(
    r"modrinth\.com/(?:mod|resourcepack|shader|plugin|datapack|modpack|project)/([\w!@$()`.+,\"\-']+)"
)
# Modrinth 的 slug 规则；项目 ID 也满足它
SLUG_PATTERN = re.compile(r"^[\w!@$()`.+,\"\-']{3,64}$")


def parse_identifier(query: str) -> str:
    """从 Modrinth 页面链接中提取 slug，其他输入原样返回（去掉首尾空白）"""
    query = query.strip()
    match = MODRINTH_URL_PATTERN.search(query)
    if match:
        return match.group(1)
    return query


def is_possible_slug(identifier: str) -> bool:
    return bool(SLUG_PATTERN.match(identifier))


def build_stub(
    project: ProjectInfo,
    version: VersionInfo,
    file: FileInfo,
    content_type: ContentType,
    game_version: str,
    loader: str,
) -> Stub:
    """用注册中心数据原样构建存根"""
    return Stub(
        name=project.title,
        project_id=project.id,
        slug=project.slug,
        type=content_type,
        loader=loader,
        game_version=game_version,
        hashes=Hashes(
            sha1=file.hashes.get("sha1", ""),
            sha512=file.hashes.get("sha512", ""),
        ),
        download=Download(
            version_id=version.id,
            url=file.url,
            path=file.filename,
            size=file.size,
        ),
        environments=Environments(
            client=SideSupport.from_registry(version.client_side, project.client_side),
            server=SideSupport.from_registry(version.server_side, project.server_side),
        ),
        dependencies=version.required_dependencies,
    )


class ModResolver:
    """模组解析器"""

    def __init__(
        self,
        client: ModrinthClient,
        game_version: str,
        loader: str,
        search_limit: int = 5,
    ):
        self.client = client
        self.game_version = game_version
        self.loader = loader
        self.search_limit = search_limit
        self.matcher = VersionMatcher(game_version, loader)

    async def resolve(self, query: str, selection: Optional[int] = None) -> Resolution:
        """
        解析查询

        Args:
            query: 用户输入
            selection: 上一次返回 AMBIGUOUS 时调用方选择的候选项下标

        Returns:
            Resolution；多个搜索结果且未给出 selection 时返回 AMBIGUOUS 和候选列表
        """
        identifier = parse_identifier(query)
        if not identifier:
            return Resolution(ResultKind.NOT_FOUND, message="查询为空")

        incompatible: Optional[ProjectInfo] = None
        if selection is None and is_possible_slug(identifier):
            project = await self.client.get_project(identifier)
            if project is not None:
                if self.matcher.is_compatible(project):
                    logger.debug(f"直接找到项目 {project.title} ({project.slug})")
                    return await self.resolve_project(project)
                logger.debug(
                    f"项目 {project.title} ({project.slug}) 不匹配整合包的游戏版本或加载器，改为搜索"
                )
                incompatible = project

        hits = await self.client.search(
            identifier, self.game_version, self.loader, self.search_limit
        )

        if not hits:
            if incompatible is not None:
                return Resolution(
                    ResultKind.NO_COMPATIBLE_VERSION,
                    project=incompatible,
                    message=f"{incompatible.title} 不支持 {self.game_version} / {self.loader}",
                )
            return Resolution(ResultKind.NOT_FOUND, message=f"没有找到与 {query} 匹配的内容")

        if selection is not None:
            if not 0 <= selection < len(hits):
                return Resolution(
                    ResultKind.NOT_FOUND,
                    candidates=hits,
                    message=f"无效的选择: {selection + 1}",
                )
            hit = hits[selection]
        elif len(hits) == 1:
            hit = hits[0]
        else:
            return Resolution(
                ResultKind.AMBIGUOUS,
                candidates=hits,
                message=f"找到 {len(hits)} 个结果，需要选择",
            )

        resolution = await self.resolve_hit(hit)
        resolution.candidates = hits
        return resolution

    async def resolve_hit(self, hit: SearchHit) -> Resolution:
        """解析选中的搜索结果"""
        return await self.resolve_project_id(hit.project_id)

    async def resolve_project_id(self, project_id: str) -> Resolution:
        """
        按精确的项目 ID 或 slug 解析，不回退到搜索

        用于依赖展开和已选中的搜索结果。
        """
        project = await self.client.get_project(project_id)
        if project is None:
            return Resolution(ResultKind.NOT_FOUND, message=f"项目不存在: {project_id}")
        if not self.matcher.is_compatible(project):
            return Resolution(
                ResultKind.NO_COMPATIBLE_VERSION,
                project=project,
                message=f"{project.title} 不支持 {self.game_version} / {self.loader}",
            )
        return await self.resolve_project(project)

    async def resolve_project(self, project: ProjectInfo) -> Resolution:
        """为项目选择版本和文件并构建存根"""
        content_type = ContentType.from_registry(project.project_type)
        if content_type is None:
            return Resolution(
                ResultKind.NO_COMPATIBLE_VERSION,
                project=project,
                message=f"不支持的项目类型: {project.project_type}",
            )

        versions = await self.client.get_versions(project.id)
        version = self.matcher.select_version(versions, content_type)
        if version is None:
            return Resolution(
                ResultKind.NO_COMPATIBLE_VERSION,
                project=project,
                message=f"{project.title} 没有可用的版本",
            )

        file = select_file(version)
        if file is None:
            return Resolution(
                ResultKind.NO_DOWNLOADABLE_FILE,
                project=project,
                message=f"{project.title} 的版本 {version.version} 没有文件",
            )

        stub = build_stub(
            project, version, file, content_type, self.game_version, self.loader
        )
        return Resolution(ResultKind.OK, stub=stub, project=project)

