"""
移除操作

删除目标存根，可选地级联删除依赖它的存根，并在删除后报告孤立的依赖。
每个级联删除都是独立的文件操作：一个失败不影响其他。
"""

from enum import Enum
from typing import List, Optional

from loguru import logger

from minepack.exceptions import StubWriteError
from minepack.models import CascadeOutcome, RemovalReport, ResultKind, Stub
from minepack.operations.base import StubOperation
from minepack.services.dependency_resolver import find_dependents, find_orphans


class DependentsChoice(Enum):
    """对依赖方的处理方式"""

    NONE = "none"
    SOME = "some"
    ALL = "all"
    CANCEL = "cancel"


class RemoveOperation(StubOperation):
    """移除操作"""

    async def dependents(self, target: Stub) -> List[Stub]:
        return find_dependents(target, await self.stubs())

    async def remove(
        self,
        target: Stub,
        choice: DependentsChoice = DependentsChoice.NONE,
        selected: Optional[List[Stub]] = None,
    ) -> RemovalReport:
        """
        移除目标

        Args:
            target: 目标存根
            choice: 对依赖方的处理；CANCEL 时不做任何修改
            selected: choice 为 SOME 时要一并删除的依赖方

        Returns:
            RemovalReport；orphans 是删除后不再被任何存根依赖的前依赖
        """
        if choice is DependentsChoice.CANCEL:
            logger.info(f"已取消移除 {target.name}")
            return RemovalReport(ResultKind.CANCELLED, target)

        stubs = await self.stubs()
        dependents = find_dependents(target, stubs)
        if choice is DependentsChoice.ALL:
            cascade = dependents
        elif choice is DependentsChoice.SOME:
            chosen = {stub.project_id for stub in selected or []}
            cascade = [stub for stub in dependents if stub.project_id in chosen]
        else:
            cascade = []

        report = RemovalReport(ResultKind.OK, target)
        try:
            await self.pack.store.delete(target)
        except StubWriteError as e:
            logger.error(f"移除 {target.name} 失败: {e}")
            report.kind = ResultKind.ERROR
            report.target_error = e.message
            return report

        report.target_removed = True
        logger.success(f"已移除 {target.name}")

        removed = [target]
        report.cascade = await self._delete_each(cascade)
        removed.extend(outcome.stub for outcome in report.cascade if outcome.ok)

        report.orphans = find_orphans(removed, stubs)
        self._forget(removed)
        return report

    async def remove_orphans(self, selected: List[Stub]) -> List[CascadeOutcome]:
        """删除调用方选中的孤立依赖（尽力而为）"""
        outcomes = await self._delete_each(selected)
        self._forget([outcome.stub for outcome in outcomes if outcome.ok])
        return outcomes

    async def _delete_each(self, stubs: List[Stub]) -> List[CascadeOutcome]:
        outcomes = []
        for stub in stubs:
            try:
                await self.pack.store.delete(stub)
            except StubWriteError as e:
                logger.error(f"移除 {stub.name} 失败: {e}")
                outcomes.append(
                    CascadeOutcome(stub, ResultKind.ORPHAN_CASCADE_FAILURE, message=e.message)
                )
            else:
                logger.success(f"已移除 {stub.name}")
                outcomes.append(CascadeOutcome(stub, ResultKind.OK))
        return outcomes

    def _forget(self, removed: List[Stub]) -> None:
        """从快照中去掉已删除的存根"""
        if self._stubs is None:
            return
        removed_ids = {stub.project_id for stub in removed}
        self._stubs = [stub for stub in self._stubs if stub.project_id not in removed_ids]
