"""Decoders for the byte streams returned by the Docker engine."""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any, Union

log = logging.getLogger(__name__)

_HEADER_SIZE = 8


class LogKind(enum.Enum):
    """Origin of a chunk of container output."""

    STDIN = 0
    STDOUT = 1
    STDERR = 2
    CONSOLE = 3


@dataclass(frozen=True)
class LogOutput:
    """One chunk of container output together with the stream it came from."""

    kind: LogKind
    message: bytes

    def __str__(self) -> str:
        return self.message.decode("utf-8", errors="replace")


class JsonDataError(ValueError):
    """A JSON document in a response could not be decoded."""

    def __init__(self, message: str, column: int, contents: str = "") -> None:
        super().__init__(f"Failed to deserialize JSON: {message} (column {column})")
        self.message = message
        self.column = column
        self.contents = contents


class NewlineLogOutputDecoder:
    """Splits attach/exec/log output into framed or newline-delimited chunks.

    Framed output carries an 8-byte header (stream type, three padding bytes,
    big-endian payload length). Output whose first byte is not a stream type
    has no header and is split on newlines, or passed through whole when the
    connection is TCP.
    """

    def __init__(self, is_tcp: bool) -> None:
        self.is_tcp = is_tcp
        self._buffer = bytearray()
        self._pending: tuple[LogKind, int] | None = None

    def feed(self, data: bytes) -> None:
        """Append received bytes to the internal buffer."""
        self._buffer += data

    def decode(self) -> LogOutput | None:
        """Return the next complete chunk, or None if more data is needed."""
        buf = self._buffer
        if self._pending is None:
            if buf and buf[0] > LogKind.STDERR.value:
                if self.is_tcp:
                    log.debug("no header, but connection is tcp: returning raw data")
                    message = bytes(buf)
                    buf.clear()
                    return LogOutput(LogKind.CONSOLE, message)
                pos = buf.find(b"\n")
                if pos < 0:
                    log.debug("no newline found")
                    return None
                message = bytes(buf[: pos + 1])
                del buf[: pos + 1]
                return LogOutput(LogKind.CONSOLE, message)

            if len(buf) < _HEADER_SIZE:
                log.debug("not enough data to read header")
                return None

            header = bytes(buf[:_HEADER_SIZE])
            del buf[:_HEADER_SIZE]
            length = int.from_bytes(header[4:8], "big")
            log.debug("read header, type = %d, length = %d", header[0], length)
            self._pending = (LogKind(header[0]), length)

        kind, length = self._pending
        if len(buf) < length:
            log.debug("not enough data to read payload")
            return None
        message = bytes(buf[:length])
        del buf[:length]
        self._pending = None
        return LogOutput(kind, message)


def _is_eof(err: json.JSONDecodeError) -> bool:
    return err.msg.startswith("Unterminated string") or err.pos >= len(err.doc.rstrip())


def _decode_json(data: bytes) -> Any:
    """Decode one JSON document; None means it is incomplete (or null)."""
    log.debug("decoding JSON line from stream: %s", data.decode("utf-8", errors="replace"))
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as err:
        if err.end == len(data) and err.reason == "unexpected end of data":
            return None
        raise JsonDataError(err.reason, err.start + 1, data.decode("utf-8", "replace")) from err
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        if _is_eof(err):
            return None
        raise JsonDataError(err.msg, err.colno, text) from err


class JsonLineDecoder:
    """Decodes a stream of newline-delimited JSON documents."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, data: bytes) -> None:
        """Append received bytes to the internal buffer."""
        self._buffer += data

    def decode(self) -> Any:
        """Return the next decoded document, or None if more data is needed.

        A line that does not hold a complete document is taken to contain an
        unescaped newline: the newline is dropped and the text kept for later.
        """
        buf = self._buffer
        if not buf:
            return None
        pos = buf.find(b"\n")
        if pos >= 0:
            value = _decode_json(bytes(buf[:pos]))
            if value is None:
                del buf[pos]
                return None
            del buf[: pos + 1]
            return value
        value = _decode_json(bytes(buf))
        if value is not None:
            buf.clear()
        return value


Decoder = Union[NewlineLogOutputDecoder, JsonLineDecoder]


class StreamReader:
    """File-like async reader over an async iterable of byte chunks."""

    def __init__(self, stream: AsyncIterable[bytes]) -> None:
        self._chunks = aiter(stream)
        self._chunk = b""
        self._pos = 0

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the current chunk; b"" at the end."""
        while self._pos >= len(self._chunk):
            try:
                chunk = await anext(self._chunks)
            except StopAsyncIteration:
                return b""
            except OSError:
                raise
            except Exception as err:
                raise OSError(str(err)) from err
            self._chunk, self._pos = bytes(chunk), 0

        end = len(self._chunk) if size < 0 else min(len(self._chunk), self._pos + size)
        data = self._chunk[self._pos:end]
        self._pos = end
        return data


async def iter_decoded(decoder: Decoder, chunks: AsyncIterable[bytes]) -> AsyncIterator[Any]:
    """Feed chunks to a decoder and yield every item it produces."""
    async for chunk in chunks:
        decoder.feed(chunk)
        while (item := decoder.decode()) is not None:
            yield item
    if decoder._buffer:
        raise EOFError("bytes remaining on stream")