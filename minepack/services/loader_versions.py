"""
加载器版本服务

为 init 命令查询某个 Minecraft 版本可用的最新加载器版本。
"""

from typing import List, Optional

from loguru import logger

from minepack.exceptions import APIError
from minepack.models import ModLoader
from minepack.services.api_client import ModrinthClient

FABRIC_META_URL = "https://meta.fabricmc.net/v2/versions/loader/{mc_version}"
QUILT_META_URL = "https://meta.quiltmc.org/v3/versions/loader/{mc_version}"
FORGE_METADATA_URL = (
    "https://files.minecraftforge.net/net/minecraftforge/forge/maven-metadata.json"
)
NEOFORGE_VERSIONS_URL = (
    "https://maven.neoforged.net/api/maven/versions/releases/net/neoforged/{artifact}"
)


def strip_mc_version(version: str, mc_version: str) -> str:
    """去掉形如 1.20.1-47.2.0 中的 Minecraft 版本段"""
    return "-".join(part for part in version.split("-") if part != mc_version)


def neoforge_prefix(mc_version: str) -> Optional[str]:
    """NeoForge 版本号以 Minecraft 的次版本和修订号开头，例如 1.20.4 -> 20.4."""
    parts = mc_version.split(".")
    if len(parts) < 2:
        return None
    minor = parts[2] if len(parts) > 2 else "0"
    return f"{parts[1]}.{minor}."


class LoaderVersionService:
    """加载器版本查询"""

    def __init__(self, client: ModrinthClient):
        self.client = client

    async def latest(self, loader: ModLoader, mc_version: str) -> Optional[str]:
        """
        获取最新加载器版本

        Returns:
            加载器版本；查询失败或没有可用版本时返回 None
        """
        getters = {
            ModLoader.FABRIC: self.get_fabric_version,
            ModLoader.QUILT: self.get_quilt_version,
            ModLoader.FORGE: self.get_forge_version,
            ModLoader.NEOFORGE: self.get_neoforge_version,
        }
        try:
            version = await getters[loader](mc_version)
        except APIError as e:
            logger.warning(f"无法获取 {loader.friendly_name} 版本: {e}")
            return None

        if version is None:
            logger.warning(f"{mc_version} 没有可用的 {loader.friendly_name} 版本")
        return version

    async def get_fabric_version(self, mc_version: str) -> Optional[str]:
        """获取 Fabric 加载器版本"""
        versions = await self.client.get_json(FABRIC_META_URL.format(mc_version=mc_version))
        if versions:
            return versions[0]["loader"]["version"]
        return None

    async def get_quilt_version(self, mc_version: str) -> Optional[str]:
        """获取 Quilt 加载器版本"""
        versions = await self.client.get_json(QUILT_META_URL.format(mc_version=mc_version))
        if versions:
            return versions[0]["loader"]["version"]
        return None

    async def get_forge_version(self, mc_version: str) -> Optional[str]:
        """获取 Forge 加载器版本"""
        data = await self.client.get_json(FORGE_METADATA_URL)
        versions = (data or {}).get(mc_version, [])
        if versions:
            return strip_mc_version(versions[-1], mc_version)  # 最新版本在最后
        return None

    async def get_neoforge_version(self, mc_version: str) -> Optional[str]:
        """获取 NeoForge 版本"""
        if mc_version == "1.20.1":
            # 1.20.1 的 NeoForge 仍以 forge 构件发布
            versions = await self._neoforge_versions("forge")
            matching = [v for v in versions if v.startswith(f"{mc_version}-")]
            if matching:
                return strip_mc_version(matching[-1], mc_version)
            return None

        prefix = neoforge_prefix(mc_version)
        if prefix is None:
            return None
        versions = await self._neoforge_versions("neoforge")
        matching = [v for v in versions if v.startswith(prefix)]
        return matching[-1] if matching else None

    async def _neoforge_versions(self, artifact: str) -> List[str]:
        data = await self.client.get_json(NEOFORGE_VERSIONS_URL.format(artifact=artifact))
        return list((data or {}).get("versions", []))
