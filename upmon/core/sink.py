"""Append-only line output to the console or a file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from upmon.core.errors import SinkWriteError

LOGGER = logging.getLogger(__name__)


class OutputSink:
    """Writes each line immediately, terminated by a single newline."""

    def __init__(self, stream: TextIO, *, owned: bool = False, name: str = "<stdout>") -> None:
        self._stream = stream
        self._owned = owned
        self._closed = False
        self.name = name

    @classmethod
    def open(cls, path: Path | None = None) -> OutputSink:
        if path is None:
            return cls(sys.stdout)
        try:
            stream = open(path, "a", encoding="utf-8")
        except OSError as exc:
            raise SinkWriteError(f"Could not open output file {path}: {exc}") from exc
        LOGGER.debug("Appending output to %s", path)
        return cls(stream, owned=True, name=str(path))

    def write_line(self, line: str) -> None:
        if self._closed:
            raise SinkWriteError(f"Output {self.name} is already closed")
        try:
            self._stream.write(f"{line}\n")
            self._stream.flush()
        except OSError as exc:
            raise SinkWriteError(f"Could not write to {self.name}: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._owned:
                self._stream.close()
            else:
                self._stream.flush()
        except OSError as exc:
            raise SinkWriteError(f"Could not flush {self.name}: {exc}") from exc

    def __enter__(self) -> OutputSink:
        return self

    def __exit__(self, exc_type: object, *exc_info: object) -> None:
        if exc_type is None:
            self.close()
            return
        # Keep the in-flight error as the reported cause.
        try:
            self.close()
        except SinkWriteError as exc:
            LOGGER.warning("%s", exc)
