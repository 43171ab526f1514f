"""
Minepack 命令

每个命令模块提供 register(registry)，build_registry() 在启动时调用一次。
"""

from typing import Dict, List

import click


class CommandRegistry:
    """命令注册表"""

    def __init__(self):
        self._commands: Dict[str, click.Command] = {}

    def register(self, command: click.Command) -> click.Command:
        if command.name in self._commands:
            raise ValueError(f"命令已注册: {command.name}")
        self._commands[command.name] = command
        return command

    def get(self, name: str) -> click.Command:
        return self._commands[name]

    def names(self) -> List[str]:
        return list(self._commands)

    def install(self, group: click.Group) -> None:
        """把所有命令加入 click 命令组"""
        for command in self._commands.values():
            group.add_command(command)


def build_registry() -> CommandRegistry:
    """创建包含全部内置命令的注册表"""
    from minepack.commands import (
        add,
        depmap,
        export,
        importing,
        info,
        init,
        listing,
        query,
        remove,
        search,
        update,
        usage,
        version,
    )

    registry = CommandRegistry()
    for module in (
        init,
        importing,
        add,
        remove,
        update,
        listing,
        query,
        search,
        depmap,
        info,
        export,
        version,
        usage,
    ):
        module.register(registry)
    return registry


__all__ = ["CommandRegistry", "build_registry"]
