"""
packwiz 导入操作

pack.toml 转换为 pack.mp.json；每个带 Modrinth 项目 ID 的 .pw.toml
按项目 ID 重新解析为存根（取当前最新的兼容版本）；
其余非 packwiz 文件按原有目录结构复制到 overrides/。
"""

import os
import shutil
from pathlib import Path
from typing import List, Set, Union

from loguru import logger

from minepack.exceptions import MinepackError, PackImportError
from minepack.models import ImportOutcome, ImportReport, ResultKind
from minepack.services.api_client import ModrinthClient
from minepack.services.mod_resolver import ModResolver
from minepack.services.packwiz import PackwizEntry, PackwizReader
from minepack.storage import Pack


class PackwizImport:
    """从 packwiz 整合包创建 minepack 项目"""

    def __init__(self, source: Union[str, Path], client: ModrinthClient):
        self.reader = PackwizReader(Path(source))
        self.client = client

    async def run(self, root: Union[str, Path], force: bool = False) -> ImportReport:
        """
        导入到 root

        Raises:
            PackImportError: pack.toml 缺失或无效，或 overrides 复制失败
            ProjectError: root 中已有项目且没有指定 force
        """
        descriptor = self.reader.descriptor()
        pack = await Pack.create(root, descriptor, force=force)
        resolver = ModResolver(self.client, pack.game_version, pack.loader)

        report = ImportReport()
        seen: Set[str] = set()
        for path in self.reader.entry_files():
            try:
                entry = self.reader.read_entry(path)
            except PackImportError as e:
                logger.warning(f"跳过 {path.name}: {e.message}")
                report.entries.append(
                    ImportOutcome(path.name, ResultKind.ERROR, message=e.message)
                )
                continue
            report.entries.append(await self._import_entry(pack, resolver, entry, seen))

        report.overrides = self._copy_overrides(pack)
        logger.success(
            f"已从 {self.reader.root} 导入 {len(report.imported)} 个内容，"
            f"{len(report.overrides)} 个 overrides 文件"
        )
        return report

    async def _import_entry(
        self, pack: Pack, resolver: ModResolver, entry: PackwizEntry, seen: Set[str]
    ) -> ImportOutcome:
        if not entry.mod_id:
            logger.warning(f"{entry.name} 没有 Modrinth 项目 ID，已跳过")
            return ImportOutcome(
                entry.source, ResultKind.NOT_FOUND, message="没有 Modrinth 项目 ID"
            )

        try:
            resolution = await resolver.resolve_project_id(entry.mod_id)
        except MinepackError as e:
            logger.error(f"解析 {entry.name} 失败: {e}")
            return ImportOutcome(entry.source, ResultKind.ERROR, message=str(e))

        if not resolution.ok:
            logger.warning(f"无法导入 {entry.name}: {resolution.message}")
            return ImportOutcome(entry.source, resolution.kind, message=resolution.message)

        stub = resolution.stub
        if stub.project_id in seen:
            return ImportOutcome(
                entry.source,
                ResultKind.DUPLICATE,
                stub=stub,
                message=f"{stub.name} 已导入",
            )

        try:
            await pack.store.write(stub)
        except MinepackError as e:
            logger.error(f"写入 {stub.name} 失败: {e}")
            return ImportOutcome(entry.source, ResultKind.ERROR, stub=stub, message=str(e))

        seen.add(stub.project_id)
        if entry.version_id and entry.version_id != stub.download.version_id:
            logger.info(f"{stub.name} 使用最新的兼容版本 {stub.download.path}")
        logger.success(f"已导入 {stub.name} ({stub.download.path})")
        return ImportOutcome(entry.source, ResultKind.OK, stub=stub)

    def _copy_overrides(self, pack: Pack) -> List[str]:
        """复制非 packwiz 文件到 overrides/，返回相对路径"""
        exclude = [pack.descriptor_path, pack.store.directory, pack.overrides_dir]
        copied: List[str] = []
        for path in self.reader.override_files(exclude):
            relative = path.relative_to(self.reader.root)
            target = pack.overrides_dir / relative
            try:
                os.makedirs(target.parent, exist_ok=True)
                shutil.copy2(path, target)
            except OSError as e:
                raise PackImportError(
                    f"复制 {relative} 失败: {e}", context={"path": str(path)}
                ) from e
            copied.append(relative.as_posix())
            logger.debug(f"复制 overrides 文件 {relative}")
        return copied
