"""
CLI 模块

命令行接口实现。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import click
from loguru import logger

from minepack import __version__
from minepack.commands import CommandRegistry, build_registry
from minepack.config import Settings, load_settings
from minepack.exceptions import ConfigError
from minepack.logger import setup_logger
from minepack.services import ModrinthClient


@dataclass
class AppContext:
    """命令共享的运行时上下文"""

    settings: Settings
    root: Path = field(default_factory=Path.cwd)
    client_factory: Callable[[Settings], ModrinthClient] = ModrinthClient

    def client(self) -> ModrinthClient:
        return self.client_factory(self.settings)


def create_cli(registry: CommandRegistry) -> click.Group:
    """用命令注册表创建 click 命令组"""

    @click.group(name="minepack", context_settings={"help_option_names": ["-h", "--help"]})
    @click.option("--debug", is_flag=True, help="启用调试模式")
    @click.option("--config", "config_path", type=click.Path(dir_okay=False), help="配置文件路径")
    @click.option(
        "-C",
        "--directory",
        type=click.Path(file_okay=False),
        default=".",
        help="整合包项目目录",
    )
    @click.version_option(version=__version__, prog_name="minepack")
    @click.pass_context
    def cli(ctx: click.Context, debug: bool, config_path: Optional[str], directory: str):
        """Minepack - Minecraft 整合包管理工具"""
        if debug:
            setup_logger(level="DEBUG")
            logger.debug("调试模式已启用")

        if ctx.obj is None:
            try:
                settings = load_settings(config_path)
            except ConfigError as e:
                raise click.ClickException(f"配置错误: {e}")
            ctx.obj = AppContext(settings=settings, root=Path(directory).resolve())

    registry.install(cli)
    return cli


def main():
    setup_logger()
    cli = create_cli(build_registry())
    cli(prog_name="minepack")


if __name__ == "__main__":
    main()
