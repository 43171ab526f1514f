"""
Minepack 下载模块

导出 --download 时使用：下载队列、并发下载和哈希校验。
"""

from minepack.download.manager import DownloadManager, DownloadStats
from minepack.download.queue import DownloadQueue, DownloadTask
from minepack.download.verifier import FileVerifier

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "DownloadQueue",
    "DownloadTask",
    "FileVerifier",
]
