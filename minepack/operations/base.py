"""
变更操作基类
"""

from typing import List, Optional

from minepack.models import LocalLookup, Stub
from minepack.services.stub_finder import find_stub
from minepack.storage import Pack


class StubOperation:
    """持有整合包和命令开始时读取的存根快照"""

    def __init__(self, pack: Pack):
        self.pack = pack
        self._stubs: Optional[List[Stub]] = None

    async def stubs(self, reload: bool = False) -> List[Stub]:
        if self._stubs is None or reload:
            self._stubs = await self.pack.stubs()
        return self._stubs

    async def find_target(self, query: str, selection: Optional[int] = None) -> LocalLookup:
        """在已有存根中定位目标"""
        return find_stub(query, await self.stubs(), selection)
