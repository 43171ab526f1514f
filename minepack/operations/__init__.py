"""
Minepack 变更操作

add / remove / update 三种操作和 packwiz 导入，组合解析引擎和存根存储。
"""

from minepack.operations.add import AddOperation, DependencyPolicy
from minepack.operations.remove import DependentsChoice, RemoveOperation
from minepack.operations.update import UpdateOperation
from minepack.operations.import_packwiz import PackwizImport

__all__ = [
    "AddOperation",
    "DependencyPolicy",
    "RemoveOperation",
    "DependentsChoice",
    "UpdateOperation",
    "PackwizImport",
]
