"""
Secret redaction for strings and byte streams.

Values are replaced longest first. When one secret is a substring of another
("hello" inside "hello123") the longer one must be consumed before the
shorter one is looked for, otherwise the tail of the longer secret ("123")
would be left in clear text next to the shorter one's marker.

Usage:
    redactor = Redactor(entries)
    redactor.redact("token=hello123")            # "token=**REDACTED**"

    with RedactingWriter(sys.stdout.buffer, redactor) as out:
        out.write(chunk)                          # emitted line by line
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import BinaryIO

from keyward.config import DEFAULT_MAX_LINE_BYTES
from keyward.errors import LineTooLongError
from keyward.models import EnvEntry

logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024


class Redactor:
    """Replaces every known secret value with its redaction marker."""

    def __init__(self, entries: Iterable[EnvEntry]):
        kept = [e for e in entries if e.found and e.value]
        kept.sort(key=lambda e: len(e.value), reverse=True)
        self.entries: list[EnvEntry] = kept
        self._pairs = [(e.value, e.redact_with) for e in kept]
        self._byte_pairs = [(v.encode(), r.encode()) for v, r in self._pairs]

    def redact(self, text: str) -> str:
        for value, marker in self._pairs:
            text = text.replace(value, marker)
        return text

    def redact_bytes(self, data: bytes) -> bytes:
        for value, marker in self._byte_pairs:
            data = data.replace(value, marker)
        return data


class RedactingWriter:
    """Line-buffered binary writer that redacts before passing data on.

    Complete lines are written through as soon as they arrive. A trailing
    line without a newline is held until close(), which emits it unchanged
    apart from redaction. The wrapped stream is flushed, never closed.
    """

    def __init__(self, out: BinaryIO, redactor: Redactor, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES):
        self.out = out
        self.redactor = redactor
        self.max_line_bytes = max_line_bytes
        self._buffer = bytearray()
        self.closed = False

    def write(self, data: bytes | str) -> int:
        if self.closed:
            raise ValueError("write to closed RedactingWriter")
        if isinstance(data, str):
            data = data.encode()
        self._buffer.extend(data)

        start = 0
        while True:
            nl = self._buffer.find(b"\n", start)
            if nl == -1:
                break
            if nl - start > self.max_line_bytes:
                raise LineTooLongError(self.max_line_bytes)
            self.out.write(self.redactor.redact_bytes(bytes(self._buffer[start : nl + 1])))
            start = nl + 1
        del self._buffer[:start]

        if len(self._buffer) > self.max_line_bytes:
            raise LineTooLongError(self.max_line_bytes)
        return len(data)

    def flush(self) -> None:
        self.out.flush()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._buffer:
            self.out.write(self.redactor.redact_bytes(bytes(self._buffer)))
            self._buffer.clear()
        self.out.flush()

    def __enter__(self) -> RedactingWriter:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def redact_stream(
    reader: BinaryIO,
    out: BinaryIO,
    redactor: Redactor,
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
) -> None:
    """Copy ``reader`` to ``out`` with every secret redacted."""
    with RedactingWriter(out, redactor, max_line_bytes) as writer:
        while chunk := reader.read(READ_CHUNK):
            writer.write(chunk)
    logger.debug("Redacted stream with %d secrets", len(redactor.entries))
