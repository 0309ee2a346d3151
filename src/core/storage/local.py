import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO

import aiofiles

from .base import StorageService

logger = logging.getLogger(__name__)


class LocalStorageService(StorageService):
    """Implementation of StorageService for local filesystem."""

    def __init__(self, media_root: str, media_url: str = "/uploads"):
        self.media_root = Path(media_root)
        self.media_root.mkdir(parents=True, exist_ok=True)
        self.media_url = "/" + media_url.strip("/")
        logger.debug(f"LocalStorageService initialized with base path {self.media_root}")

    async def save_file(self, file: BinaryIO, path: str, content_type: str = None) -> str:
        full_path = self.media_root / path
        full_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Saving file to local storage: {full_path}")
        async with aiofiles.open(full_path, "wb") as out_file:
            content = await file.read()
            await out_file.write(content)

        logger.info(f"Successfully saved file: {full_path}")
        return path

    async def delete_file(self, path: str) -> bool:
        full_path = self.media_root / path
        logger.debug(f"Deleting file from local storage: {full_path}")
        if full_path.exists():
            await asyncio.to_thread(os.remove, full_path)
            logger.info(f"Successfully deleted file: {full_path}")
            return True
        logger.warning(f"File not found for deletion: {full_path}")
        return False

    async def exists(self, path: str) -> bool:
        return (self.media_root / path).is_file()

    def get_url(self, path: str) -> str:
        url = f"{self.media_url}/{path}".replace("//", "/")
        logger.debug(f"Generating URL for local path: {path} -> {url}")
        return url
