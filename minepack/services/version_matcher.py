"""
版本匹配服务

判断项目是否满足整合包约束（游戏版本 + 加载器），并按优先级选择版本和文件。
"""

from typing import List, Optional, Union

from loguru import logger

from minepack.models import ContentType, FileInfo, ProjectInfo, VersionInfo


class VersionMatcher:
    """版本匹配器"""

    def __init__(self, game_version: str, loader: str):
        self.game_version = game_version
        self.loader = loader

    def matches(
        self,
        version: str,
        target_versions: Union[str, List[str]],
    ) -> bool:
        """
        检查版本是否匹配目标版本列表

        Args:
            version: 要检查的版本
            target_versions: 目标版本或版本列表

        Returns:
            是否匹配
        """
        if isinstance(target_versions, str):
            target_versions = [target_versions]

        return version in target_versions

    def is_compatible(self, project: ProjectInfo) -> bool:
        """
        判断项目是否与整合包兼容

        项目必须列出整合包的游戏版本；模组还必须列出整合包的加载器。
        整合包 (modpack) 等不支持的类型永远不兼容。
        """
        content_type = ContentType.from_registry(project.project_type)
        if content_type is None:
            return False
        if not self.matches(self.game_version, project.game_versions):
            return False
        if content_type.uses_loader and not self.matches(self.loader, project.loaders):
            return False
        return True

    def select_version(
        self,
        versions: List[VersionInfo],
        content_type: ContentType,
    ) -> Optional[VersionInfo]:
        """
        按优先级选择版本

        模组: 游戏版本和加载器都匹配 > 仅加载器匹配 > 第一个版本。
        其他类型: 游戏版本匹配 > 第一个版本。
        注册中心按发布时间倒序返回版本，因此每一级都取第一个匹配项。
        """
        if not versions:
            return None

        game_matches = [v for v in versions if self.matches(self.game_version, v.game_versions)]

        if content_type.uses_loader:
            loader_matches = [v for v in versions if self.matches(self.loader, v.loaders)]
            exact = [v for v in game_matches if self.matches(self.loader, v.loaders)]
            if exact:
                return exact[0]
            if loader_matches:
                logger.warning(
                    f"没有同时匹配 {self.game_version} 和 {self.loader} 的版本，"
                    f"使用仅匹配加载器的版本 {loader_matches[0].version}"
                )
                return loader_matches[0]
        elif game_matches:
            return game_matches[0]

        logger.warning(f"没有匹配约束的版本，使用最新版本 {versions[0].version}")
        return versions[0]


def select_file(version: VersionInfo) -> Optional[FileInfo]:
    """选择版本中的主文件，没有标记 primary 时取第一个文件"""
    if not version.files:
        return None

    for file in version.files:
        if file.primary:
            return file

    return version.files[0]
