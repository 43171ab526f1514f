"""
Minepack 存储层

包含存根存储和整合包项目。
"""

from minepack.storage.stub_store import StubStore, STUBS_DIR, STUB_EXT
from minepack.storage.pack import Pack, PACK_FILE, OVERRIDES_DIR

__all__ = [
    "StubStore",
    "STUBS_DIR",
    "STUB_EXT",
    "Pack",
    "PACK_FILE",
    "OVERRIDES_DIR",
]
