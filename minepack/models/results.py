"""
结果模型

解析引擎、本地查找和变更操作返回带类型标记的结果，而不是抛出异常，
调用方按 kind 分支处理（例如 update 只对 NO_COMPATIBLE_VERSION 提供 忽略/移除 选择）。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from minepack.models.api import ProjectInfo, SearchHit
from minepack.models.stub import Stub


class ResultKind(Enum):
    """结果类型"""

    OK = "ok"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    NO_COMPATIBLE_VERSION = "no_compatible_version"
    NO_DOWNLOADABLE_FILE = "no_downloadable_file"
    DUPLICATE = "duplicate"
    CANCELLED = "cancelled"
    ORPHAN_CASCADE_FAILURE = "orphan_cascade_failure"
    ERROR = "error"


@dataclass
class Resolution:
    """查询解析结果"""

    kind: ResultKind
    stub: Optional[Stub] = None
    project: Optional[ProjectInfo] = None
    candidates: List[SearchHit] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class LocalLookup:
    """在已有存根中查找目标的结果"""

    kind: ResultKind
    stub: Optional[Stub] = None
    candidates: List[Stub] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class AddResult:
    kind: ResultKind
    stub: Optional[Stub] = None
    candidates: List[SearchHit] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    existing: Optional[Stub] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class DependencyOutcome:
    """单个依赖的添加结果"""

    identifier: str
    kind: ResultKind
    stub: Optional[Stub] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class CascadeOutcome:
    """级联删除中单个存根的结果"""

    stub: Stub
    kind: ResultKind
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class RemovalReport:
    """
    移除操作报告

    目标本身的删除结果 (target_removed / target_error) 与级联结果 (cascade) 分开报告。
    orphans 是删除之后计算出的孤立依赖，由调用方决定是否继续删除。
    """

    kind: ResultKind
    target: Stub
    target_removed: bool = False
    target_error: str = ""
    cascade: List[CascadeOutcome] = field(default_factory=list)
    orphans: List[Stub] = field(default_factory=list)

    @property
    def failed_cascade(self) -> List[CascadeOutcome]:
        return [outcome for outcome in self.cascade if not outcome.ok]


@dataclass
class UpdateOutcome:
    """单个存根的更新结果"""

    original: Stub
    kind: ResultKind
    stub: Optional[Stub] = None
    candidates: List[SearchHit] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    @property
    def changed(self) -> bool:
        """版本是否发生了变化"""
        return (
            self.stub is not None
            and self.stub.download.version_id != self.original.download.version_id
        )


@dataclass
class ImportOutcome:
    """导入单个外部内容的结果"""

    source: str
    kind: ResultKind
    stub: Optional[Stub] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK


@dataclass
class ImportReport:
    """整合包导入结果"""

    entries: List[ImportOutcome] = field(default_factory=list)
    overrides: List[str] = field(default_factory=list)

    @property
    def imported(self) -> List[Stub]:
        return [entry.stub for entry in self.entries if entry.ok]

    @property
    def skipped(self) -> List[ImportOutcome]:
        return [entry for entry in self.entries if not entry.ok]
