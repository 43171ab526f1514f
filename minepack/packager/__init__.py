"""
Minepack 打包模块
"""

from minepack.packager.mrpack import LOADER_KEYS, MrpackBuilder, create_index

__all__ = ["LOADER_KEYS", "MrpackBuilder", "create_index"]
