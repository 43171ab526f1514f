"""
添加操作

解析查询、拒绝重复、写入存根，并按调用方的策略补全缺失的必需依赖。
依赖只展开一层：被补全的依赖自己的依赖不会继续添加。
"""

from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from minepack.exceptions import MinepackError
from minepack.models import AddResult, DependencyOutcome, ResultKind, Stub
from minepack.operations.base import StubOperation
from minepack.services.dependency_resolver import partition_dependencies
from minepack.services.mod_resolver import ModResolver
from minepack.storage import Pack


class DependencyPolicy(Enum):
    """缺失依赖的处理策略"""

    ALL = "all"
    NONE = "none"
    SELECT = "select"


def find_existing(stub: Stub, stubs: List[Stub]) -> Optional[Stub]:
    """按项目 ID 或 slug 查找已存在的存根"""
    for existing in stubs:
        if existing.project_id == stub.project_id or existing.slug == stub.slug:
            return existing
    return None


class AddOperation(StubOperation):
    """添加操作"""

    def __init__(self, pack: Pack, resolver: ModResolver):
        super().__init__(pack)
        self.resolver = resolver

    async def run(self, query: str, selection: Optional[int] = None) -> AddResult:
        """
        添加内容

        Args:
            query: 用户输入
            selection: 上一次返回 AMBIGUOUS 时选择的候选项下标

        Returns:
            AddResult；成功时 missing 为尚未在整合包中的必需依赖
        """
        stubs = await self.stubs()

        try:
            resolution = await self.resolver.resolve(query, selection)
        except MinepackError as e:
            logger.error(f"解析 {query} 失败: {e}")
            return AddResult(ResultKind.ERROR, message=str(e))

        if not resolution.ok:
            return AddResult(
                resolution.kind,
                candidates=resolution.candidates,
                message=resolution.message,
            )

        stub = resolution.stub
        existing = find_existing(stub, stubs)
        if existing is not None:
            return AddResult(
                ResultKind.DUPLICATE,
                stub=stub,
                existing=existing,
                message=f"{existing.name} 已在整合包中",
            )

        try:
            await self.pack.store.write(stub)
        except MinepackError as e:
            logger.error(f"写入 {stub.name} 失败: {e}")
            return AddResult(ResultKind.ERROR, stub=stub, message=str(e))

        logger.success(f"已添加 {stub.name} ({stub.download.path})")
        missing = partition_dependencies(stub, stubs).missing
        stubs.append(stub)
        return AddResult(ResultKind.OK, stub=stub, missing=missing)

    @staticmethod
    def select_dependencies(
        missing: List[str],
        policy: DependencyPolicy,
        indices: Optional[Iterable[int]] = None,
    ) -> List[str]:
        """
        按策略挑选要添加的依赖

        SELECT 时 indices 是 missing 中的下标，越界的下标会被忽略。
        """
        if policy is DependencyPolicy.ALL:
            return list(missing)
        if policy is DependencyPolicy.NONE:
            return []

        selected = []
        for index in indices or []:
            if 0 <= index < len(missing) and missing[index] not in selected:
                selected.append(missing[index])
        return selected

    async def add_dependencies(self, identifiers: List[str]) -> List[DependencyOutcome]:
        """
        添加依赖

        每个依赖独立处理，失败只记录在对应的结果中，不影响其他依赖和已添加的父项。
        """
        stubs = await self.stubs()
        outcomes = []

        for identifier in identifiers:
            if any(stub.matches_identifier(identifier) for stub in stubs):
                outcomes.append(
                    DependencyOutcome(identifier, ResultKind.DUPLICATE, message="已在整合包中")
                )
                continue

            try:
                resolution = await self.resolver.resolve_project_id(identifier)
                if not resolution.ok:
                    logger.warning(f"无法添加依赖 {identifier}: {resolution.message}")
                    outcomes.append(
                        DependencyOutcome(identifier, resolution.kind, message=resolution.message)
                    )
                    continue

                stub = resolution.stub
                existing = find_existing(stub, stubs)
                if existing is not None:
                    outcomes.append(
                        DependencyOutcome(
                            identifier,
                            ResultKind.DUPLICATE,
                            stub=existing,
                            message=f"{existing.name} 已在整合包中",
                        )
                    )
                    continue

                await self.pack.store.write(stub)
            except MinepackError as e:
                logger.error(f"添加依赖 {identifier} 失败: {e}")
                outcomes.append(DependencyOutcome(identifier, ResultKind.ERROR, message=str(e)))
                continue

            stubs.append(stub)
            logger.success(f"已添加依赖 {stub.name}")
            outcomes.append(DependencyOutcome(identifier, ResultKind.OK, stub=stub))

        return outcomes
