"""
File sources for planogram uploads.

The decoder only ever sees bytes. Where those bytes come from (an HTTP
upload, a file on disk for batch imports, an in-memory buffer in tests)
is hidden behind the FileSource interface. Reading is the only step of
an import that suspends.
"""

import asyncio
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from fastapi import UploadFile


@runtime_checkable
class FileSource(Protocol):
    """Anything that can hand over an upload's name and raw bytes."""

    @property
    def filename(self) -> Optional[str]:
        ...

    async def read_bytes(self) -> bytes:
        ...


class BytesFileSource:
    """In-memory upload (already read, or built by tests)."""

    def __init__(self, content: bytes, filename: str):
        self._content = content
        self._filename = filename

    @property
    def filename(self) -> Optional[str]:
        return self._filename

    async def read_bytes(self) -> bytes:
        return self._content


class PathFileSource:
    """File on disk, read off the event loop."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def filename(self) -> Optional[str]:
        return self.path.name

    async def read_bytes(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


class UploadFileSource:
    """FastAPI multipart upload."""

    def __init__(self, upload: UploadFile):
        self.upload = upload

    @property
    def filename(self) -> Optional[str]:
        return self.upload.filename

    async def read_bytes(self) -> bytes:
        return await self.upload.read()
