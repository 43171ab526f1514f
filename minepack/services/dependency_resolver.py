"""
依赖处理服务

存根集合上的纯计算：依赖方、孤立依赖、缺失依赖和依赖图。
这些函数从不修改存根，由变更操作决定如何使用结果。
依赖引用可能是项目 ID 也可能是 slug，两者都算匹配。
"""

from dataclasses import dataclass, field
from typing import Dict, List

from minepack.models import Stub


@dataclass
class DependencyPartition:
    """依赖划分结果"""

    present: List[Stub] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


def find_dependents(target: Stub, stubs: List[Stub]) -> List[Stub]:
    """找出依赖目标存根的其他存根"""
    return [
        stub
        for stub in stubs
        if stub.project_id != target.project_id and stub.depends_on(target)
    ]


def find_orphans(removed: List[Stub], stubs: List[Stub]) -> List[Stub]:
    """
    找出删除后变为孤立的依赖

    孤立依赖是被某个已删除存根依赖、且不再被任何剩余存根依赖的存根。
    已删除的存根既不算候选项，也不算“仍然依赖”它的一方。
    """
    removed_ids = {stub.project_id for stub in removed}
    remaining = [stub for stub in stubs if stub.project_id not in removed_ids]

    orphans = []
    for candidate in remaining:
        if not any(stub.depends_on(candidate) for stub in removed):
            continue
        still_needed = any(
            other.depends_on(candidate)
            for other in remaining
            if other.project_id != candidate.project_id
        )
        if not still_needed:
            orphans.append(candidate)
    return orphans


def partition_dependencies(stub: Stub, stubs: List[Stub]) -> DependencyPartition:
    """把存根的依赖划分为已存在和缺失两部分"""
    partition = DependencyPartition()
    for dependency in stub.dependencies:
        match = next(
            (
                other
                for other in stubs
                if other.project_id != stub.project_id
                and other.matches_identifier(dependency)
            ),
            None,
        )
        if match is None:
            partition.missing.append(dependency)
        elif match not in partition.present:
            partition.present.append(match)
    return partition


def build_dependency_map(stubs: List[Stub]) -> Dict[str, List[Stub]]:
    """
    构建依赖图

    Returns:
        依赖标识 -> 依赖它的存根列表（按存根顺序）
    """
    dependency_map: Dict[str, List[Stub]] = {}
    for stub in stubs:
        for dependency in stub.dependencies:
            dependency_map.setdefault(dependency, []).append(stub)
    return dependency_map
