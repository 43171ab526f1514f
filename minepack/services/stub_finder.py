"""
本地存根查找

remove / update / query 用来在已有存根中定位目标。
"""

from typing import List, Optional

from minepack.models import LocalLookup, ResultKind, Stub

MAX_FUZZY_MATCHES = 5


def score_stub(stub: Stub, query: str) -> int:
    """模糊匹配得分：名称包含 +3，slug 包含 +2，项目 ID 包含 +1"""
    needle = query.lower()
    score = 0
    if needle in stub.name.lower():
        score += 3
    if needle in stub.slug.lower():
        score += 2
    if needle in stub.project_id.lower():
        score += 1
    return score


def fuzzy_matches(query: str, stubs: List[Stub]) -> List[Stub]:
    scored = [(score_stub(stub, query), stub) for stub in stubs]
    scored = [item for item in scored if item[0] > 0]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [stub for _, stub in scored[:MAX_FUZZY_MATCHES]]


def find_stub(
    query: str, stubs: List[Stub], selection: Optional[int] = None
) -> LocalLookup:
    """
    定位目标存根

    依次尝试: 精确 slug、精确项目 ID、忽略大小写的名称，最后是模糊匹配。
    模糊匹配从不自动选择，即使只有一个候选项也返回 AMBIGUOUS，
    调用方带着 selection 再次调用。
    """
    query = query.strip()
    if not query:
        return LocalLookup(ResultKind.NOT_FOUND)

    for stub in stubs:
        if stub.slug == query:
            return LocalLookup(ResultKind.OK, stub=stub)
    for stub in stubs:
        if stub.project_id == query:
            return LocalLookup(ResultKind.OK, stub=stub)
    lowered = query.lower()
    for stub in stubs:
        if stub.name.lower() == lowered:
            return LocalLookup(ResultKind.OK, stub=stub)

    candidates = fuzzy_matches(query, stubs)
    if not candidates:
        return LocalLookup(ResultKind.NOT_FOUND)

    if selection is None:
        return LocalLookup(ResultKind.AMBIGUOUS, candidates=candidates)
    if 0 <= selection < len(candidates):
        return LocalLookup(ResultKind.OK, stub=candidates[selection], candidates=candidates)
    return LocalLookup(ResultKind.NOT_FOUND, candidates=candidates)
