"""Streaming adapters that drive a Translator over byte streams.

:class:`TranslatingReader` wraps a readable byte source and yields translated
bytes; :class:`TranslatingWriter` wraps a writable sink and translates what is
written to it. Both carry partial multi-byte sequences across chunk boundaries,
so the output never depends on how the input happened to be split.
"""

import io
from typing import Any, BinaryIO, Optional

from ultra_robust_charset.shared.config import DEFAULT_READ_SIZE
from ultra_robust_charset.shared.errors import ShortWriteError
from ultra_robust_charset.shared.logging import CorrelationLogger, get_logger

from .translator import Translator

# Below this capacity the pending-input buffer doubles, above it grows by 25%
GROWTH_DOUBLING_LIMIT = 1024


def grow_capacity(current: int, needed: int) -> int:
    """Return a capacity of at least ``needed``, grown geometrically from ``current``."""
    if needed <= current:
        return current
    if current == 0:
        return needed
    capacity = current
    while capacity < needed:
        if capacity < GROWTH_DOUBLING_LIMIT:
            capacity += capacity
        else:
            capacity += capacity // 4
    return capacity


class TranslatingReader(io.RawIOBase):
    """Readable stream translating the bytes of ``source`` as they are read.

    Translated output is always drained before the translator runs again.
    When the source is exhausted the translator gets at least one final call,
    so stateful translators flush. An ``OSError`` raised by the source ends
    the input like end-of-file does and is re-raised once all output derived
    from the bytes read before it has been delivered.
    """

    def __init__(
        self,
        source: BinaryIO,
        translator: Translator,
        read_size: int = DEFAULT_READ_SIZE,
        logger: Optional[CorrelationLogger] = None,
    ) -> None:
        super().__init__()
        if read_size <= 0:
            raise ValueError("read_size must be > 0")
        self.source = source
        self.translator = translator
        self.read_size = read_size
        self.logger = logger or get_logger(__name__, component="translating_reader")

        # Capacity-managed; only self._pending[:self._pending_len] is valid
        self._pending = bytearray()
        self._pending_len = 0
        self._output = b""
        self._output_pos = 0
        self._exhausted = False
        self._flushed = False
        self._final_error: Optional[OSError] = None
        self.bytes_read = 0
        self.bytes_translated = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        size = len(view)
        if size == 0:
            return 0
        while True:
            remaining = len(self._output) - self._output_pos
            if remaining > 0:
                n = min(size, remaining)
                view[:n] = self._output[self._output_pos:self._output_pos + n]
                self._output_pos += n
                return n

            if not self._exhausted:
                self._fill(max(size, self.read_size))
            elif self._flushed:
                break
            self._translate_pending()

        if self._final_error is not None:
            raise self._final_error
        return 0

    def _fill(self, want: int) -> None:
        """Read up to ``want`` more bytes from the source into the pending buffer."""
        try:
            chunk = self.source.read(want)
        except OSError as e:
            self._final_error = e
            chunk = b""
            self.logger.warning(
                "Source failed; translating remaining input",
                extra={"error": str(e), "pending": self._pending_len},
            )

        # A source returning nothing (b"" or None) is treated as exhausted.
        if not chunk:
            self._exhausted = True
            return

        start = self._pending_len
        end = start + len(chunk)
        if end > len(self._pending):
            capacity = grow_capacity(len(self._pending), end)
            self._pending.extend(bytes(capacity - len(self._pending)))
        self._pending[start:end] = chunk
        self._pending_len = end
        self.bytes_read += len(chunk)

    def _translate_pending(self) -> None:
        data = bytes(self._pending[:self._pending_len])
        consumed, output = self.translator.translate(data, self._exhausted)

        # At end of input every byte must be consumed so the read loop ends.
        if self._exhausted and consumed == 0:
            consumed = len(data)

        self._output = bytes(output)
        self._output_pos = 0
        rest = len(data) - consumed
        if rest:
            self._pending[:rest] = data[consumed:]
        self._pending_len = rest
        self.bytes_translated += consumed

        if self._exhausted and rest == 0:
            self._flushed = True
            self.logger.debug(
                "Input translated",
                extra={
                    "bytes_read": self.bytes_read,
                    "failed": self._final_error is not None,
                },
            )


class TranslatingWriter(io.RawIOBase):
    """Writable stream translating everything written before passing it to ``sink``.

    :meth:`close` must be called to flush input held back by the translator.
    A writer that is garbage collected unclosed drops that input instead of
    writing it to the sink. The sink itself is not closed.
    """

    def __init__(
        self,
        sink: BinaryIO,
        translator: Translator,
        logger: Optional[CorrelationLogger] = None,
    ) -> None:
        super().__init__()
        self.sink = sink
        self.translator = translator
        self.logger = logger or get_logger(__name__, component="translating_writer")
        self._carry = b""
        self.bytes_written = 0

    def writable(self) -> bool:
        return True

    def write(self, data: Any) -> int:
        if self.closed:
            raise ValueError("write to closed TranslatingWriter")
        raw = bytes(data)
        chunk = self._carry + raw if self._carry else raw
        consumed, output = self.translator.translate(chunk, False)
        if output:
            self._forward(output)
        self._carry = chunk[consumed:]
        return len(raw)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._flush_translator()
        finally:
            super().close()

    def __del__(self) -> None:
        if not self.closed:
            super().close()

    def _flush_translator(self) -> None:
        while True:
            consumed, output = self.translator.translate(self._carry, True)
            self._carry = self._carry[consumed:]
            # A translator that produces nothing at end of input never will.
            if not output:
                break
            self._forward(output)
            if not self._carry:
                break
        self.logger.debug("Output flushed", extra={"bytes_written": self.bytes_written})

    def _forward(self, output: bytes) -> None:
        written = self.sink.write(output)
        if written is not None and written < len(output):
            raise ShortWriteError(written, len(output))
        self.bytes_written += len(output)
