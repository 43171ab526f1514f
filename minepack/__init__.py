"""
Minepack - Minecraft 整合包管理工具

以存根 (stub) 记录整合包内容，从 Modrinth 解析版本并导出 .mrpack。
"""

__version__ = "0.1.0"
