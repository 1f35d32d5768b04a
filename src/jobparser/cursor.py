"""Bounds-checked read cursor over an in-memory byte buffer."""

from __future__ import annotations

import struct

from .exceptions import StringDecodeError, TruncatedDataError

_U16_LE = struct.Struct("<H")
_U16_BE = struct.Struct(">H")
_U32_LE = struct.Struct("<I")
_I32_LE = struct.Struct("<i")


class ByteCursor:
    """Sequential reader that tracks its position in a buffer.

    Every read checks bounds and advances the position. Nothing is ever
    clamped: a read past the end raises TruncatedDataError.

    Example:
        >>> cursor = ByteCursor(data)
        >>> product = cursor.read_u16()
        >>> cursor.seek(70)
        >>> name = cursor.read_utf16_string("name")
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = data
        self._offset = offset

    @property
    def offset(self) -> int:
        """Current position in the buffer."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Bytes left between the position and the end of the buffer."""
        return max(len(self._data) - self._offset, 0)

    def seek(self, offset: int) -> None:
        """Move to an absolute offset."""
        if offset < 0 or offset > len(self._data):
            raise TruncatedDataError(offset, 0, len(self._data))
        self._offset = offset

    def read(self, length: int) -> bytes:
        """Read exactly `length` bytes and advance.

        Raises:
            TruncatedDataError: If fewer than `length` bytes remain
        """
        end = self._offset + length
        if end > len(self._data):
            raise TruncatedDataError(self._offset, length, len(self._data))
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self.read(fmt.size))[0]

    def read_u16(self) -> int:
        return self._unpack(_U16_LE)

    def read_u16_be(self) -> int:
        return self._unpack(_U16_BE)

    def read_u32(self) -> int:
        return self._unpack(_U32_LE)

    def read_i32(self) -> int:
        return self._unpack(_I32_LE)

    def read_utf16_string(self, field: str) -> str:
        """Read a u16 count-prefixed UTF-16 LE string.

        The prefix counts UTF-16 code units, so the payload spans count * 2
        bytes. NUL code units are padding and are removed from the result.

        Args:
            field: Field name used in error messages

        Raises:
            TruncatedDataError: If the prefix or payload runs past the end
            StringDecodeError: If the payload is not valid UTF-16
        """
        count = self.read_u16()
        payload_offset = self._offset
        payload = self.read(count * 2)
        try:
            text = payload.decode("utf-16-le")
        except UnicodeDecodeError as e:
            raise StringDecodeError(field, payload_offset, e.reason) from e
        return text.replace("\x00", "")
