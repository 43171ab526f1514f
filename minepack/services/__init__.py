"""
Minepack 服务层

包含 API 客户端、解析引擎、版本匹配、依赖计算和本地查找服务。
"""

from minepack.services.api_client import ModrinthClient, build_search_facets
from minepack.services.version_matcher import VersionMatcher, select_file
from minepack.services.mod_resolver import (
    ModResolver,
    build_stub,
    parse_identifier,
)
from minepack.services.dependency_resolver import (
    DependencyPartition,
    build_dependency_map,
    find_dependents,
    find_orphans,
    partition_dependencies,
)
from minepack.services.stub_finder import find_stub
from minepack.services.loader_versions import LoaderVersionService
from minepack.services.packwiz import PackwizEntry, PackwizReader

__all__ = [
    "ModrinthClient",
    "build_search_facets",
    "VersionMatcher",
    "select_file",
    "ModResolver",
    "build_stub",
    "parse_identifier",
    "DependencyPartition",
    "build_dependency_map",
    "find_dependents",
    "find_orphans",
    "partition_dependencies",
    "find_stub",
    "LoaderVersionService",
    "PackwizEntry",
    "PackwizReader",
]
