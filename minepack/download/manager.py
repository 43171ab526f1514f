"""
下载管理器

导出时把存根对应的文件下载到整合包的 overrides 中。
固定数量的工作协程从队列取任务，失败的任务按指数退避重试。
"""

import asyncio
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

import aiohttp
import aiofiles
from loguru import logger

from minepack.config import Settings
from minepack.download.queue import DownloadQueue, DownloadTask
from minepack.download.verifier import FileVerifier
from minepack.exceptions import (
    DownloadChecksumError,
    DownloadError,
    DownloadFileError,
    DownloadNetworkError,
)
from minepack.models import Stub
from minepack.utils import format_size


@dataclass
class DownloadStats:
    """下载统计"""

    total: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or Settings()
        self.max_concurrent = self.settings.max_concurrent
        self.max_retries = self.settings.max_retries
        self.retry_delay = self.settings.retry_delay
        self.queue = DownloadQueue()
        self.verifier = FileVerifier()
        self.stats = DownloadStats()
        self._session = session
        self._owned_session = session is None
        self._workers: List[asyncio.Task] = []
        self._failures: List[Tuple[DownloadTask, DownloadError]] = []

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.settings.user_agent}
            )
            self._owned_session = True
        return self._session

    async def enqueue(self, task: DownloadTask) -> bool:
        """添加下载任务"""
        added = await self.queue.put(task)
        if added:
            self.stats.total += 1
            logger.debug(f"[队列] '{task.filename}' 已加入下载队列")
        return added

    async def enqueue_stub(self, stub: Stub, download_dir: str) -> bool:
        return await self.enqueue(DownloadTask.from_stub(stub, download_dir))

    async def download_file(self, task: DownloadTask) -> None:
        """
        下载单个文件

        Raises:
            DownloadError: 重试次数用尽后仍然失败
        """
        file_path = task.file_path
        try:
            os.makedirs(task.download_dir, exist_ok=True)
            # 检查文件是否已存在且校验通过
            existing = await self.verifier.is_valid(file_path, task.hashes)
        except OSError as e:
            self.stats.failed += 1
            logger.error(f"[错误] 无法准备 '{task.filename}' 的下载目录: {e}")
            raise DownloadFileError(
                f"无法准备下载目录: {e}", context={"path": file_path}
            ) from e

        if existing:
            self.stats.skipped += 1
            logger.info(f"[跳过] '{task.filename}' 已存在且校验通过")
            return

        logger.info(f"[开始] 下载: {task.filename}")

        for attempt in range(self.max_retries + 1):
            try:
                await self._fetch(task)
                if not await self.verifier.verify(file_path, task.hashes):
                    raise DownloadChecksumError(
                        f"哈希校验失败: {task.filename}",
                        context={"file": task.filename, "url": task.url},
                    )

                self.stats.completed += 1
                logger.success(f"[完成] '{task.filename}' 下载完成")
                return

            except DownloadError as e:
                # 清理不完整的文件
                if os.path.exists(file_path):
                    os.remove(file_path)

                if attempt < self.max_retries:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"[重试] 下载 '{task.filename}' 失败 (第 {attempt + 1} 次): {e}. "
                        f"{delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(delay)
                else:
                    self.stats.failed += 1
                    logger.error(f"[错误] 下载 '{task.filename}' 最终失败: {e}")
                    raise

    async def _fetch(self, task: DownloadTask) -> None:
        """把响应体流式写入目标文件"""
        try:
            async with self.session.get(task.url) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}",
                        context={"url": task.url, "status": response.status},
                    )

                async with aiofiles.open(task.file_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(65536):
                        await f.write(chunk)
                        self.stats.bytes_downloaded += len(chunk)
        except aiohttp.ClientError as e:
            raise DownloadNetworkError(
                f"网络错误: {e}", context={"url": task.url}
            ) from e
        except asyncio.TimeoutError as e:
            raise DownloadNetworkError("下载超时", context={"url": task.url}) from e
        except OSError as e:
            raise DownloadFileError(
                f"无法写入文件: {e}", context={"path": task.file_path}
            ) from e

    async def _worker(self):
        """下载工作协程"""
        while True:
            task = await self.queue.get()
            try:
                await self.download_file(task)
            except DownloadError as e:
                # 单个任务失败不结束工作协程，失败记录在 failures 中
                self._failures.append((task, e))
            finally:
                self.queue.task_done()

    async def start(self):
        """启动下载器"""
        logger.info(f"[启动] 下载器启动，最大并发数: {self.max_concurrent}")
        self._workers = [
            asyncio.create_task(self._worker(), name=f"downloader-{i}")
            for i in range(self.max_concurrent)
        ]

    async def wait_until_complete(self):
        """等待所有任务完成"""
        await self.queue.join()

    async def stop(self):
        """停止下载器"""
        logger.debug("[停止] 正在停止下载器...")
        for worker in self._workers:
            worker.cancel()

        if self._workers:
            await asyncio.gather(*self._workers, return_exceptions=True)
            self._workers.clear()

        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
        logger.debug(
            f"[停止] 下载器已停止，共下载 {format_size(self.stats.bytes_downloaded)}"
        )

    async def run(self):
        """运行下载器（启动并等待完成）"""
        await self.start()
        try:
            await self.wait_until_complete()
        finally:
            await self.stop()

    @property
    def failures(self) -> List[Tuple[DownloadTask, DownloadError]]:
        """失败的下载"""
        return list(self._failures)

    async def __aenter__(self):
        """异步上下文管理器入口"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.stop()
