"""Byte cursor that turns fuzz input into primitive values."""

from .errors import CursorExhausted


DEFAULT_MAX_STRING_LEN = 64


class FuzzCursor:
    """Reads primitives from a finite byte buffer.

    Every extraction either succeeds completely or raises ``CursorExhausted``
    without moving the read position, so the same buffer always yields the
    same sequence of values.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.position = 0

    def remaining(self) -> int:
        return len(self.data) - self.position

    def _take(self, n: int) -> bytes:
        if n > self.remaining():
            raise CursorExhausted(n, self.remaining())
        chunk = self.data[self.position:self.position + n]
        self.position += n
        return chunk

    def get_bytes(self, n: int) -> bytes:
        return self._take(n)

    def get_int(self) -> int:
        """One byte, 0..255."""
        return self._take(1)[0]

    def get_bool(self) -> bool:
        return self.get_int() & 1 == 1

    def get_uint32(self) -> int:
        return int.from_bytes(self._take(4), 'big')

    def get_uint64(self) -> int:
        return int.from_bytes(self._take(8), 'big')

    def get_int64(self) -> int:
        return int.from_bytes(self._take(8), 'big', signed=True)

    def get_string(self, max_len: int = DEFAULT_MAX_STRING_LEN) -> str:
        """Length-prefixed string; every byte maps to one Latin-1 character."""
        length = self.get_int() % (max_len + 1)
        if length > self.remaining():
            # Give back the length byte so the failed read leaves no trace.
            self.position -= 1
            raise CursorExhausted(length + 1, self.remaining() + 1)
        return self._take(length).decode('latin-1')

    def get_string_from(self, alphabet: str, max_len: int) -> str:
        """String of at most ``max_len`` characters drawn from ``alphabet``."""
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        length = self.get_int() % (max_len + 1)
        if length > self.remaining():
            self.position -= 1
            raise CursorExhausted(length + 1, self.remaining() + 1)
        raw = self._take(length)
        return ''.join(alphabet[b % len(alphabet)] for b in raw)
