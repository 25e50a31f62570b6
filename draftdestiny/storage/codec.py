"""
Binary wire format shared by catalog slots and saved collections.

All integers are fixed width and big-endian. Strings are a u64 byte length
followed by UTF-8 bytes; sequences and maps are a u64 element count followed
by the elements; optionals are a u8 presence tag followed by the value when
present.

A reader can stop after any prefix of a record, which is how a collection's
metadata is read without decoding its cards and history.
"""

import struct
from collections.abc import Callable, Iterable
from typing import TypeVar

from draftdestiny.models.failure import CorruptDataError

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I32 = struct.Struct(">i")


class BinaryWriter:
    """Appends encoded values to an in-memory buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def _pack(self, fmt: struct.Struct, value: int) -> None:
        try:
            self._buf += fmt.pack(value)
        except struct.error as e:
            raise ValueError(f"{value} does not fit in {fmt.size * 8} bits") from e

    def u8(self, value: int) -> None:
        self._pack(_U8, value)

    def u16(self, value: int) -> None:
        self._pack(_U16, value)

    def u32(self, value: int) -> None:
        self._pack(_U32, value)

    def u64(self, value: int) -> None:
        self._pack(_U64, value)

    def i32(self, value: int) -> None:
        self._pack(_I32, value)

    def boolean(self, value: bool) -> None:
        self.u8(1 if value else 0)

    def string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.u64(len(data))
        self._buf += data

    def option(self, value: T | None, write: Callable[[T], None]) -> None:
        if value is None:
            self.u8(0)
        else:
            self.u8(1)
            write(value)

    def seq(self, items: Iterable[T], write: Callable[[T], None]) -> None:
        values = list(items)
        self.u64(len(values))
        for value in values:
            write(value)

    def map(
        self,
        items: dict[K, V],
        write_key: Callable[[K], None],
        write_value: Callable[[V], None],
    ) -> None:
        self.u64(len(items))
        for key, value in items.items():
            write_key(key)
            write_value(value)


class BinaryReader:
    """
    Decodes values from a buffer in the order they were written.

    Any read past the end of the buffer, invalid UTF-8 or invalid tag raises
    CorruptDataError naming `what`.
    """

    def __init__(self, data: bytes, what: str = "data") -> None:
        self._data = memoryview(data)
        self._pos = 0
        self.what = what

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def corrupt(self, detail: str) -> CorruptDataError:
        return CorruptDataError(self.what, f"{detail} (offset {self._pos})")

    def _take(self, size: int) -> memoryview:
        if size > self.remaining:
            raise self.corrupt(f"unexpected end of data, wanted {size} bytes")
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        value: int = fmt.unpack(self._take(fmt.size))[0]
        return value

    def u8(self) -> int:
        return self._unpack(_U8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def u64(self) -> int:
        return self._unpack(_U64)

    def i32(self) -> int:
        return self._unpack(_I32)

    def boolean(self) -> bool:
        tag = self.u8()
        if tag > 1:
            raise self.corrupt(f"invalid bool {tag}")
        return tag == 1

    def string(self) -> str:
        raw = self._take(self.u64())
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise self.corrupt("invalid UTF-8 string") from e

    def option(self, read: Callable[[], T]) -> T | None:
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read()
        raise self.corrupt(f"invalid option tag {tag}")

    def seq(self, read: Callable[[], T]) -> list[T]:
        count = self.u64()
        # Every element takes at least one byte
        if count > self.remaining:
            raise self.corrupt(f"sequence length {count} exceeds data")
        return [read() for _ in range(count)]

    def map(self, read_key: Callable[[], K], read_value: Callable[[], V]) -> dict[K, V]:
        count = self.u64()
        if count > self.remaining:
            raise self.corrupt(f"map length {count} exceeds data")
        result: dict[K, V] = {}
        for _ in range(count):
            key = read_key()
            result[key] = read_value()
        return result

    def finish(self) -> None:
        """Require that the whole buffer was consumed."""
        if self.remaining:
            raise self.corrupt(f"{self.remaining} trailing bytes")
