"""
更新操作

用存根的 slug 重新解析并整体覆盖存根记录。更新不会触发依赖级联。
"""

import asyncio
from pathlib import Path
from typing import List, Optional

from loguru import logger

from minepack.exceptions import MinepackError
from minepack.models import ResultKind, Stub, UpdateOutcome
from minepack.operations.base import StubOperation
from minepack.services.mod_resolver import ModResolver
from minepack.storage import Pack


class UpdateOperation(StubOperation):
    """更新操作"""

    def __init__(self, pack: Pack, resolver: ModResolver, max_concurrent: int = 8):
        super().__init__(pack)
        self.resolver = resolver
        self.max_concurrent = max_concurrent

    async def update_stub(self, stub: Stub, selection: Optional[int] = None) -> UpdateOutcome:
        """
        更新单个存根

        重新解析得到多个候选项时，若其中有同一个项目则自动选择它；
        否则返回 AMBIGUOUS，由调用方带着 selection 再次调用。
        """
        try:
            resolution = await self.resolver.resolve(stub.slug, selection)
            if resolution.kind is ResultKind.AMBIGUOUS:
                index = next(
                    (
                        i
                        for i, hit in enumerate(resolution.candidates)
                        if hit.project_id == stub.project_id
                    ),
                    None,
                )
                if index is None:
                    return UpdateOutcome(
                        stub,
                        ResultKind.AMBIGUOUS,
                        candidates=resolution.candidates,
                        message=resolution.message,
                    )
                resolution = await self.resolver.resolve(stub.slug, index)
        except MinepackError as e:
            logger.error(f"更新 {stub.name} 失败: {e}")
            return UpdateOutcome(stub, ResultKind.ERROR, message=str(e))

        if not resolution.ok:
            return UpdateOutcome(
                stub,
                resolution.kind,
                candidates=resolution.candidates,
                message=resolution.message,
            )

        fresh = resolution.stub
        if fresh.project_id != stub.project_id and selection is None:
            return UpdateOutcome(
                stub,
                ResultKind.AMBIGUOUS,
                candidates=resolution.candidates,
                message=f"{stub.slug} 现在解析到了另一个项目 {fresh.name}",
            )

        try:
            previous = self.pack.store.locate(stub)
            path = await self.pack.store.write(fresh)
            # 换成了另一个项目：旧记录不会被同名覆盖时需要单独删除
            if fresh.project_id != stub.project_id and previous not in (None, path):
                await self.pack.store.delete(stub)
        except MinepackError as e:
            logger.error(f"写入 {fresh.name} 失败: {e}")
            return UpdateOutcome(stub, ResultKind.ERROR, message=str(e))

        outcome = UpdateOutcome(stub, ResultKind.OK, stub=fresh)
        if outcome.changed:
            logger.success(f"已更新 {fresh.name} -> {fresh.download.path}")
        else:
            logger.info(f"{fresh.name} 已是最新")
        return outcome

    async def update_all(self) -> List[UpdateOutcome]:
        """
        并发更新所有存根

        并发数受 max_concurrent 限制；单个存根失败只体现在它自己的结果中。
        """
        stubs = await self.stubs()
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def update_one(stub: Stub) -> UpdateOutcome:
            async with semaphore:
                return await self.update_stub(stub)

        logger.info(f"正在更新 {len(stubs)} 个存根")
        return list(await asyncio.gather(*(update_one(stub) for stub in stubs)))

    async def remove_stub(self, stub: Stub) -> Path:
        """删除没有兼容版本的存根"""
        path = await self.pack.store.delete(stub)
        logger.success(f"已移除 {stub.name}")
        return path
