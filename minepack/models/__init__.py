"""
Minepack 数据模型包

包含存根、整合包描述、API 模型和结果模型定义。
"""

from minepack.models.stub import (
    ContentType,
    SideSupport,
    Hashes,
    Download,
    Environments,
    Stub,
)
from minepack.models.pack import (
    ModLoader,
    Modloader,
    PackDescriptor,
)
from minepack.models.api import (
    ProjectInfo,
    SearchHit,
    FileInfo,
    DependencyInfo,
    VersionInfo,
)
from minepack.models.results import (
    ResultKind,
    Resolution,
    LocalLookup,
    AddResult,
    DependencyOutcome,
    CascadeOutcome,
    RemovalReport,
    UpdateOutcome,
    ImportOutcome,
    ImportReport,
)

__all__ = [
    # 存根模型
    "ContentType",
    "SideSupport",
    "Hashes",
    "Download",
    "Environments",
    "Stub",
    # 整合包模型
    "ModLoader",
    "Modloader",
    "PackDescriptor",
    # API 模型
    "ProjectInfo",
    "SearchHit",
    "FileInfo",
    "DependencyInfo",
    "VersionInfo",
    # 结果模型
    "ResultKind",
    "Resolution",
    "LocalLookup",
    "AddResult",
    "DependencyOutcome",
    "CascadeOutcome",
    "RemovalReport",
    "UpdateOutcome",
    "ImportOutcome",
    "ImportReport",
]
