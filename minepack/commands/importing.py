"""
import 命令

从其他格式的整合包创建 minepack 项目，目前支持 packwiz。
"""

from pathlib import Path
from typing import Optional

import click

from minepack.commands.common import run
from minepack.exceptions import PackImportError, ProjectError
from minepack.models import ImportReport
from minepack.operations import PackwizImport

IMPORT_FORMATS = ["packwiz"]


async def import_pack(app, source: Path, force: bool) -> ImportReport:
    async with app.client() as client:
        operation = PackwizImport(source, client)
        try:
            return await operation.run(app.root, force=force)
        except PackImportError as e:
            raise click.ClickException(str(e))
        except ProjectError as e:
            raise click.ClickException(f"{e.message}，使用 --force 覆盖")


@click.command("import")
@click.argument("source_format", metavar="FORMAT", type=click.Choice(IMPORT_FORMATS))
@click.option(
    "-i",
    "--input",
    "source",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="要导入的整合包目录（默认为项目目录）",
)
@click.option("--force", is_flag=True, help="覆盖已有的 pack.mp.json")
@click.pass_obj
def import_command(app, source_format: str, source: Optional[Path], force: bool):
    """从其他格式导入整合包

    packwiz: 读取 pack.toml 和 *.pw.toml，其余文件复制到 overrides/。
    """
    report = run(import_pack(app, source or app.root, force))

    for stub in report.imported:
        click.echo(f"已导入 {stub.name} ({stub.download.path})")
    for entry in report.skipped:
        click.echo(f"跳过 {entry.source}: {entry.message or entry.kind.value}", err=True)
    click.echo(
        f"导入完成: {len(report.imported)} 个内容，"
        f"{len(report.skipped)} 个跳过，{len(report.overrides)} 个 overrides 文件"
    )


def register(registry) -> None:
    registry.register(import_command)
