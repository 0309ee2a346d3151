import asyncio
import io
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Union

import aiofiles

logger = logging.getLogger(__name__)


class AsyncBytesIO(io.BytesIO):
    """
    BytesIO wrapper that enables async reading.
    Useful for interfaces expecting an async file-like object.
    """
    async def read(self, *args, **kwargs):
        return super().read(*args, **kwargs)


async def read_json(filepath: Union[str, Path]) -> Any:
    file_path_obj = Path(filepath)
    if not file_path_obj.is_file():
        raise FileNotFoundError(f"File not found: {filepath}")

    async with aiofiles.open(file_path_obj, "r", encoding="utf-8") as f:
        content = await f.read()
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON decode error: {e} - file: {filepath}") from e


async def write_json_atomic(filepath: Union[str, Path], data: Any) -> None:
    """Write ``data`` as JSON to a sibling temp file, then swap it into place."""
    file_path_obj = Path(filepath)
    file_path_obj.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = file_path_obj.with_name(f".{file_path_obj.name}.{uuid.uuid4().hex}.tmp")

    try:
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, ensure_ascii=False, indent=2))
        await asyncio.to_thread(os.replace, tmp_path, file_path_obj)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug(f"Write file successfully! File: {filepath}")
