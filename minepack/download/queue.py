"""
下载任务队列

按目标路径去重的 FIFO 队列。
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Dict, Optional

from minepack.exceptions import DownloadFileError
from minepack.models import Hashes, Stub


@dataclass
class DownloadTask:
    """下载任务"""

    url: str
    filename: str
    download_dir: str
    hashes: Optional[Hashes] = None
    name: str = ""

    @property
    def file_path(self) -> str:
        return os.path.join(self.download_dir, self.filename)

    @classmethod
    def from_stub(cls, stub: Stub, download_dir: str) -> "DownloadTask":
        return cls(
            url=stub.download.url,
            filename=stub.download.path,
            download_dir=download_dir,
            hashes=stub.hashes,
            name=stub.name,
        )


class DownloadQueue:
    """下载队列"""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._urls: Dict[str, str] = {}  # 目标路径 -> 地址，用于去重

    async def put(self, task: DownloadTask) -> bool:
        """
        添加任务到队列

        Returns:
            True 如果任务是新添加的，False 如果同一文件已在队列中

        Raises:
            DownloadFileError: 另一个地址的文件要写到同一个目标路径
        """
        queued = self._urls.get(task.file_path)
        if queued is not None:
            if queued != task.url:
                raise DownloadFileError(
                    f"'{task.filename}' 对应多个不同的下载地址",
                    context={"path": task.file_path, "urls": [queued, task.url]},
                )
            return False

        self._urls[task.file_path] = task.url
        await self._queue.put(task)
        return True

    async def get(self) -> DownloadTask:
        """获取下一个任务"""
        return await self._queue.get()

    def task_done(self):
        """标记任务完成"""
        self._queue.task_done()

    def qsize(self) -> int:
        return self._queue.qsize()

    async def join(self):
        """等待所有任务完成"""
        await self._queue.join()
