"""
packwiz 整合包读取

packwiz 项目由根目录的 pack.toml 和每个内容一个 *.pw.toml 元数据文件组成。
这里只负责读取，不访问网络，也不写文件。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Set

import toml
from loguru import logger

from minepack.exceptions import PackImportError
from minepack.models import ModLoader, Modloader, PackDescriptor

PACK_TOML = "pack.toml"
METADATA_EXT = ".pw.toml"
# 只属于 packwiz 自身、不作为 overrides 导入的文件
PACKWIZ_FILES = {PACK_TOML, "index.toml", ".packwizignore"}
# pack.toml [versions] 中加载器的检查顺序
LOADER_KEYS = (
    ("fabric", ModLoader.FABRIC),
    ("quilt", ModLoader.QUILT),
    ("neoforge", ModLoader.NEOFORGE),
    ("forge", ModLoader.FORGE),
)


@dataclass
class PackwizEntry:
    """一个 .pw.toml 描述的内容"""

    name: str
    filename: str
    source: str
    mod_id: str = ""
    version_id: str = ""


def read_toml(path: Path) -> Dict[str, Any]:
    try:
        data = toml.load(str(path))
    except (OSError, UnicodeDecodeError, toml.TomlDecodeError) as e:
        raise PackImportError(
            f"无法解析 {path.name}: {e}", context={"path": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise PackImportError(f"{path.name} 内容无效", context={"path": str(path)})
    return data


def parse_pack_toml(data: Dict[str, Any]) -> PackDescriptor:
    """把 pack.toml 的内容转换为整合包描述"""
    versions = data.get("versions")
    if not isinstance(versions, dict) or not versions.get("minecraft"):
        raise PackImportError("pack.toml 缺少 [versions] minecraft")

    for key, loader in LOADER_KEYS:
        if versions.get(key):
            modloader = Modloader(name=loader, version=str(versions[key]))
            break
    else:
        raise PackImportError(
            "pack.toml 中没有支持的模组加载器",
            context={"versions": sorted(versions)},
        )

    return PackDescriptor(
        name=str(data.get("name") or "Imported Pack"),
        author=str(data.get("author") or ""),
        description=str(data.get("description") or ""),
        game_version=str(versions["minecraft"]),
        modloader=modloader,
        version=str(data.get("version") or "1.0.0"),
    )


def parse_entry(data: Dict[str, Any], source: str) -> PackwizEntry:
    """把 .pw.toml 的内容转换为 PackwizEntry"""
    update = data.get("update")
    modrinth = update.get("modrinth") if isinstance(update, dict) else None
    if not isinstance(modrinth, dict):
        modrinth = {}

    return PackwizEntry(
        name=str(data.get("name") or source),
        filename=str(data.get("filename") or ""),
        source=source,
        mod_id=str(modrinth.get("mod-id") or ""),
        version_id=str(modrinth.get("version") or ""),
    )


class PackwizReader:
    """packwiz 项目读取器"""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def pack_toml(self) -> Path:
        return self.root / PACK_TOML

    def descriptor(self) -> PackDescriptor:
        """
        读取 pack.toml

        Raises:
            PackImportError: 没有 pack.toml 或内容无效
        """
        if not self.pack_toml.is_file():
            raise PackImportError(
                f"{self.root} 中没有 {PACK_TOML}，不是 packwiz 整合包",
                context={"root": str(self.root)},
            )
        return parse_pack_toml(read_toml(self.pack_toml))

    def entry_files(self) -> List[Path]:
        """全部 .pw.toml 文件，按相对路径排序"""
        return sorted(
            path for path in self._walk() if path.name.endswith(METADATA_EXT)
        )

    def read_entry(self, path: Path) -> PackwizEntry:
        source = path.relative_to(self.root).as_posix()
        return parse_entry(read_toml(path), source)

    def override_files(self, exclude: Iterable[Path] = ()) -> List[Path]:
        """
        需要作为 overrides 导入的文件

        Args:
            exclude: 不导入的文件或目录（例如导入到同一目录时的 stubs/ 和 overrides/）
        """
        files = [
            path
            for path in self._walk(exclude)
            if path.name not in PACKWIZ_FILES and not path.name.endswith(METADATA_EXT)
        ]
        return sorted(files)

    def _walk(self, exclude: Iterable[Path] = ()) -> List[Path]:
        skipped: Set[Path] = {Path(p).resolve() for p in exclude}
        found: List[Path] = []
        for current, dirs, files in os.walk(self.root):
            current_path = Path(current)
            dirs[:] = sorted(
                d
                for d in dirs
                if not d.startswith(".") and (current_path / d).resolve() not in skipped
            )
            for name in files:
                path = current_path / name
                if path.resolve() in skipped:
                    logger.debug(f"跳过 {path}")
                    continue
                found.append(path)
        return found
