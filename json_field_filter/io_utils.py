from __future__ import annotations

import io
import os
from contextlib import contextmanager
from typing import BinaryIO, Callable, Iterator, Optional

ProgressCallback = Callable[[int, int], None]


def resolve_path(file_obj) -> str:
    """Return the filesystem path of an uploaded file or path-like."""
    if file_obj is None:
        raise ValueError("No file uploaded.")
    if isinstance(file_obj, (str, bytes, os.PathLike)):
        return os.fsdecode(file_obj)
    # gradio uploads and open file objects carry the path in .name
    return os.fsdecode(file_obj.name)


class ProgressReader(io.RawIOBase):
    """Binary reader that reports how many bytes have been pulled so far.

    Wraps another binary stream; `callback(bytes_read, total_bytes)` runs
    after every read that returned data.
    """

    def __init__(self, raw: BinaryIO, total_bytes: int, callback: ProgressCallback):
        super().__init__()
        self._raw = raw
        self.total_bytes = total_bytes
        self.bytes_read = 0
        self._callback = callback

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        data = self._raw.read(len(buffer))
        n = len(data)
        buffer[:n] = data
        if n:
            self.bytes_read += n
            self._callback(self.bytes_read, self.total_bytes)
        return n

    def read(self, size: int = -1) -> bytes:
        data = self._raw.read(size)
        if data:
            self.bytes_read += len(data)
            self._callback(self.bytes_read, self.total_bytes)
        return data

    def close(self) -> None:
        try:
            self._raw.close()
        finally:
            super().close()


def percent(bytes_read: int, total_bytes: int) -> int:
    if total_bytes <= 0:
        return 100
    return min(100, round(bytes_read * 100 / total_bytes))


@contextmanager
def open_source(file_obj, progress: Optional[ProgressCallback] = None) -> Iterator[BinaryIO]:
    """Open an uploaded file or path for binary streaming.

    The handle is closed on every exit path. With `progress`, reads go through
    a ProgressReader sized by the file's length on disk.
    """
    path = resolve_path(file_obj)
    f = open(path, 'rb')
    try:
        if progress is None:
            yield f
        else:
            yield ProgressReader(f, os.fstat(f.fileno()).st_size, progress)
    finally:
        f.close()
