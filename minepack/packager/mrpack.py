"""
Mrpack 生成器

把整合包描述和存根集合导出为 Modrinth 标准整合包 (.mrpack)。
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
from loguru import logger

from minepack.config import Settings
from minepack.download import DownloadManager
from minepack.exceptions import DownloadError, MrpackError
from minepack.models import PackDescriptor, SideSupport, Stub
from minepack.storage import Pack
from minepack.utils import sanitize_filename

INDEX_FILE = "modrinth.index.json"
SIDES = ("client", "server")

# 加载器名称 -> modrinth.index.json 中 dependencies 的键
LOADER_KEYS = {
    "fabric": "fabric-loader",
    "quilt": "quilt-loader",
    "forge": "forge",
    "neoforge": "neoforge",
}


def create_summary(descriptor: PackDescriptor) -> str:
    return (
        f'"{descriptor.name}" created by {descriptor.author} using Minepack:\n'
        f"{descriptor.description}"
    )


def filter_side(stubs: List[Stub], side: Optional[str]) -> List[Stub]:
    """只保留在指定端不是 unsupported 的存根"""
    if side is None:
        return list(stubs)
    if side not in SIDES:
        raise MrpackError(f"未知的端: {side}", context={"side": side})
    return [
        stub for stub in stubs if stub.environments.side(side) is not SideSupport.UNSUPPORTED
    ]


def stub_file_entry(stub: Stub, force_required: bool = False) -> Dict[str, Any]:
    """存根在 files 中的条目"""
    if force_required:
        env = {side: SideSupport.REQUIRED.value for side in SIDES}
    else:
        env = {side: stub.environments.side(side).value for side in SIDES}

    return {
        "path": f"{stub.type.folder}/{stub.download.path}",
        "hashes": {"sha1": stub.hashes.sha1, "sha512": stub.hashes.sha512},
        "env": env,
        "downloads": [stub.download.url],
        "fileSize": stub.download.size,
    }


def create_index(
    descriptor: PackDescriptor,
    stubs: List[Stub],
    force_required: bool = False,
) -> Dict[str, Any]:
    """
    创建 modrinth.index.json

    纯函数：相同的描述和存根总是得到相同的结果。
    """
    loader = descriptor.modloader.name.value
    dependencies = {"minecraft": descriptor.game_version}
    if descriptor.modloader.version:
        dependencies[LOADER_KEYS[loader]] = descriptor.modloader.version

    return {
        "formatVersion": 1,
        "game": "minecraft",
        "versionId": descriptor.version,
        "name": descriptor.name,
        "summary": create_summary(descriptor),
        "files": [stub_file_entry(stub, force_required) for stub in stubs],
        "dependencies": dependencies,
    }


class MrpackBuilder:
    """Mrpack 构建器"""

    def __init__(self, pack: Pack, settings: Optional[Settings] = None):
        self.pack = pack
        self.settings = settings or Settings()

    def default_output(self) -> Path:
        descriptor = self.pack.descriptor
        name = sanitize_filename(descriptor.name, fallback="pack")
        return self.pack.root / f"{name}-{descriptor.version}.mrpack"

    async def build(
        self,
        output_path: Optional[Path] = None,
        force_required: bool = False,
        side: Optional[str] = None,
        download: bool = False,
    ) -> Path:
        """
        构建 mrpack 文件

        Args:
            output_path: 输出文件路径，默认是项目根目录下的 <名称>-<版本>.mrpack
            force_required: 把所有文件的 env 都设为 required
            side: 只导出 client 或 server 端可用的内容
            download: 把文件下载进 overrides，而不是写入 files

        Returns:
            生成的文件路径

        Raises:
            MrpackError: 任何一步失败；临时目录总会被清理
        """
        output_path = Path(output_path) if output_path else self.default_output()
        stubs = filter_side(await self.pack.stubs(), side)

        temp_dir = tempfile.mkdtemp(prefix="minepack-export-")
        try:
            staging_dir = os.path.join(temp_dir, "pack")
            overrides_dir = os.path.join(staging_dir, "overrides")
            os.makedirs(overrides_dir, exist_ok=True)

            if download:
                await self._download_to_overrides(stubs, overrides_dir)
                indexed: List[Stub] = []
            else:
                indexed = stubs

            index = create_index(self.pack.descriptor, indexed, force_required)
            index_path = os.path.join(staging_dir, INDEX_FILE)
            async with aiofiles.open(index_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(index, indent=4, ensure_ascii=False))

            source_dir = str(self.pack.overrides_dir)
            if os.path.isdir(source_dir) and any(os.listdir(source_dir)):
                await self._copy_to_overrides(source_dir, overrides_dir)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            archive_base = os.path.join(temp_dir, "archive")
            zip_path = shutil.make_archive(archive_base, "zip", staging_dir)

            if output_path.exists():
                os.remove(output_path)
            shutil.move(zip_path, output_path)

        except (OSError, shutil.Error, DownloadError) as e:
            raise MrpackError(
                f"构建 mrpack 失败: {e}",
                context={"root": str(self.pack.root), "output_path": str(output_path)},
            ) from e
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

        logger.success(f"已导出 {output_path} ({len(stubs)} 个内容)")
        return output_path

    async def _download_to_overrides(self, stubs: List[Stub], overrides_dir: str):
        """下载存根文件到 overrides/<目录>/"""
        manager = DownloadManager(self.settings)
        for stub in stubs:
            await manager.enqueue_stub(stub, os.path.join(overrides_dir, stub.type.folder))
        await manager.run()

        failures = manager.failures
        if failures:
            names = ", ".join(task.filename for task, _ in failures)
            raise DownloadError(
                f"{len(failures)} 个文件下载失败: {names}",
                context={"failed": [task.url for task, _ in failures]},
            )

    async def _copy_to_overrides(self, source_dir: str, overrides_dir: str):
        """复制文件到 overrides 目录"""
        for root, dirs, files in os.walk(source_dir):
            relative_path = os.path.relpath(root, source_dir)
            dest_dir = os.path.join(overrides_dir, relative_path)
            os.makedirs(dest_dir, exist_ok=True)

            for file in files:
                shutil.copy2(os.path.join(root, file), os.path.join(dest_dir, file))
