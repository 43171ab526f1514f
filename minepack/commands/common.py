"""
命令公共工具

命令模块共用的项目加载、解析器构建和交互选择。
"""

import asyncio
from typing import Callable, Coroutine, List, Optional, Sequence, TypeVar

import click

from minepack.exceptions import MinepackError, NotAProjectError
from minepack.models import ResultKind, SearchHit, Stub
from minepack.services import ModResolver, ModrinthClient
from minepack.storage import Pack

T = TypeVar("T")


def run(coro: Coroutine):
    """在新的事件循环中运行命令"""
    return asyncio.run(coro)


async def load_pack(app) -> Pack:
    """读取当前项目；不是项目时以非零状态退出"""
    try:
        return await Pack.load(app.root)
    except NotAProjectError as e:
        raise click.ClickException(f"{e.message}。请先运行 minepack init")
    except MinepackError as e:
        raise click.ClickException(str(e))


def make_resolver(app, client: ModrinthClient, pack: Pack) -> ModResolver:
    return ModResolver(
        client,
        pack.game_version,
        pack.loader,
        search_limit=app.settings.search_limit,
    )


def describe_hit(hit: SearchHit) -> str:
    return f"{click.style(hit.title, bold=True)} ({hit.slug}) [{hit.project_type}]\n      {hit.description}"


def describe_stub(stub: Stub) -> str:
    return f"{click.style(stub.name, bold=True)} ({stub.slug}) [{stub.type.value}]"


def choose(
    items: Sequence[T],
    render: Callable[[T], str],
    title: str,
) -> Optional[int]:
    """
    让用户从列表中选择一项

    Returns:
        选中项的下标；输入 0 表示取消，返回 None
    """
    click.echo(title)
    for i, item in enumerate(items, 1):
        click.echo(f"  [{i}] {render(item)}")
    index = click.prompt(
        "选择编号（0 取消）", type=click.IntRange(0, len(items)), default=1
    )
    if index == 0:
        return None
    return index - 1


def choose_many(items: Sequence[T], render: Callable[[T], str], title: str) -> List[T]:
    """
    让用户多选

    输入以逗号分隔的编号，"all" 表示全部，直接回车表示不选。
    """
    click.echo(title)
    for i, item in enumerate(items, 1):
        click.echo(f"  [{i}] {render(item)}")
    answer = click.prompt("选择编号（逗号分隔，all 全选，回车跳过）", default="", show_default=False)
    answer = answer.strip().lower()
    if not answer:
        return []
    if answer == "all":
        return list(items)
    return [items[i] for i in parse_indices(answer, len(items))]


def parse_indices(answer: str, count: int) -> List[int]:
    """把 "1, 3" 这样的输入转换为从 0 开始的下标，忽略无效项"""
    indices = []
    for part in answer.split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        index = int(part) - 1
        if 0 <= index < count and index not in indices:
            indices.append(index)
    return indices


async def locate(operation, query: str) -> Optional[Stub]:
    """
    在已有存根中定位目标，模糊匹配时让用户选择

    Returns:
        目标存根；用户取消时返回 None
    """
    lookup = await operation.find_target(query)
    if lookup.kind is ResultKind.AMBIGUOUS:
        index = choose(lookup.candidates, describe_stub, f"没有精确匹配 {query} 的内容，是否是:")
        if index is None:
            return None
        lookup = await operation.find_target(query, index)
    if not lookup.ok:
        raise click.ClickException(f"整合包中没有找到 {query}")
    return lookup.stub
