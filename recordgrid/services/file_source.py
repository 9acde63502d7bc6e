from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable

"""File inputs for DataStore.load_from_file.

Any object with ``name``, ``size`` (bytes) and an awaitable ``text()`` works;
LocalFile adapts a filesystem path, reading on a worker thread so the event
loop is not blocked.
"""

__all__ = [
    "SourceFile",
    "LocalFile",
]


@runtime_checkable
class SourceFile(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def size(self) -> int: ...

    async def text(self) -> str: ...


class LocalFile:
    """SourceFile backed by a path on disk."""

    def __init__(self, path: Path | str, *, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    async def text(self) -> str:
        return await asyncio.to_thread(self.path.read_text, encoding=self.encoding)

    def __repr__(self) -> str:
        return f"LocalFile({str(self.path)!r})"
