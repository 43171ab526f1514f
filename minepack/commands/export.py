"""
export 命令
"""

from pathlib import Path
from typing import Optional

import click

from minepack.commands.common import load_pack, run
from minepack.exceptions import MrpackError
from minepack.packager import MrpackBuilder


async def export_pack(
    app,
    output: Optional[str],
    force_required: bool,
    side: Optional[str],
    download: bool,
) -> Path:
    pack = await load_pack(app)
    builder = MrpackBuilder(pack, app.settings)
    try:
        return await builder.build(
            output_path=Path(output) if output else None,
            force_required=force_required,
            side=side,
            download=download,
        )
    except MrpackError as e:
        raise click.ClickException(f"导出失败: {e}")


@click.command("export")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="输出文件路径")
@click.option("--force-required", is_flag=True, help="所有文件在两端都设为必需")
@click.option("--side", type=click.Choice(["client", "server"]), help="只导出某一端需要的内容")
@click.option("--download", is_flag=True, help="把文件下载进 overrides")
@click.pass_obj
def export_command(
    app,
    output: Optional[str],
    force_required: bool,
    side: Optional[str],
    download: bool,
):
    """导出为 Modrinth 整合包 (.mrpack)"""
    path = run(export_pack(app, output, force_required, side, download))
    click.echo(f"已导出 {path}")


def register(registry) -> None:
    registry.register(export_command)
