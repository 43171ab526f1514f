import json
import os
import re
from pathlib import Path
from typing import Any

import aiofiles

_UNSAFE_CHARS = re.compile(r'[/\\?%*:|"<>.\s]+')


def sanitize_filename(name: str, fallback: str = "content") -> str:
    """把名称转换为可用作文件名的形式"""
    cleaned = _UNSAFE_CHARS.sub("_", name or "").strip("_")
    cleaned = re.sub(r"_+", "_", cleaned)
    return cleaned or fallback


def format_size(size: int) -> str:
    """以人类可读的形式显示字节数"""
    value = float(size)
    for unit in ("B", "kB", "MB", "GB"):
        if value < 1000 or unit == "GB":
            if unit == "B":
                return f"{int(value)} {unit}"
            return f"{value:.2f} {unit}"
        value /= 1000
    return f"{value:.2f} GB"


async def write_json(path: Path, data: Any) -> None:
    """
    整体重写 JSON 文件

    先写入同目录的临时文件再 os.replace，避免中途崩溃留下截断的文件。
    """
    tmp_path = path.with_name(path.name + ".tmp")
    async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
        await f.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    os.replace(tmp_path, path)


async def read_json(path: Path) -> Any:
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return json.loads(await f.read())
