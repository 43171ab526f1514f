"""
文件校验器

实现 SHA1 / SHA512 校验和文件存在性检查。
"""

import hashlib
import os
from typing import Optional

import aiofiles

from minepack.models import Hashes


class FileVerifier:
    """文件校验器"""

    @staticmethod
    async def calc_hash(file_path: str, algorithm: str = "sha1") -> Optional[str]:
        """
        计算文件的哈希值

        Args:
            file_path: 文件路径
            algorithm: sha1 或 sha512

        Returns:
            十六进制哈希值或 None（如果文件不存在）
        """
        if not os.path.exists(file_path):
            return None

        digest = hashlib.new(algorithm)
        async with aiofiles.open(file_path, "rb") as f:
            while True:
                data = await f.read(65536)
                if not data:
                    break
                digest.update(data)
        return digest.hexdigest()

    @staticmethod
    async def verify(file_path: str, hashes: Optional[Hashes]) -> bool:
        """
        校验文件是否与记录的哈希匹配

        两种哈希都存在时都要匹配；没有任何哈希时视为通过。
        """
        if hashes is None:
            return True

        for algorithm in ("sha512", "sha1"):
            expected = getattr(hashes, algorithm)
            if not expected:
                continue
            current = await FileVerifier.calc_hash(file_path, algorithm)
            if current is None or current.lower() != expected.lower():
                return False
        return True

    @staticmethod
    async def is_valid(file_path: str, hashes: Optional[Hashes] = None) -> bool:
        """检查文件是否有效（存在且校验通过）"""
        if not os.path.exists(file_path):
            return False
        return await FileVerifier.verify(file_path, hashes)
