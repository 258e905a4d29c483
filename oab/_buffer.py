"""Byte sink and byte source — the buffer/cursor layer under the codecs.

ByteSink is the writer's storage: a bytearray whose physical capacity grows
by doubling, with the logical length tracked separately.  Only the logical
prefix is ever exposed.

ByteSource is the reader's storage: an immutable bytes object plus a cursor.
Every read goes through require(), so nothing ever reads past the end.
"""

from __future__ import annotations

import logging
import struct
from typing import Optional, Union

from ._constants import DEFAULT_INITIAL_CAPACITY
from ._errors import OutOfBounds

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# Precompiled little-endian layouts.  The wire is little-endian throughout.
U8 = struct.Struct("<B")
I8 = struct.Struct("<b")
U16 = struct.Struct("<H")
I16 = struct.Struct("<h")
U32 = struct.Struct("<I")
I32 = struct.Struct("<i")
F64 = struct.Struct("<d")


class ByteSink:
    """Growable write buffer with logical length separate from capacity."""

    def __init__(self, initial_capacity: int = DEFAULT_INITIAL_CAPACITY) -> None:
        if initial_capacity < 0:
            raise ValueError("initial_capacity must be >= 0")
        self._buf = bytearray(initial_capacity)
        self._len = 0

    def __len__(self) -> int:
        return self._len

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def ensure_capacity(self, extra: int) -> None:
        """Make room for `extra` more bytes, at least doubling when growing."""
        need = self._len + extra
        cap = len(self._buf)
        if need <= cap:
            return
        new_cap = max(cap, 1) * 2
        while new_cap < need:
            new_cap *= 2
        logger.debug("growing sink capacity %d -> %d", cap, new_cap)
        self._buf.extend(bytes(new_cap - cap))

    def append_byte(self, b: int) -> None:
        self.ensure_capacity(1)
        self._buf[self._len] = b
        self._len += 1

    def append(self, data: BytesLike) -> None:
        n = len(data)
        if not n:
            return
        self.ensure_capacity(n)
        self._buf[self._len:self._len + n] = data
        self._len += n

    def pack(self, layout: struct.Struct, value) -> None:
        self.ensure_capacity(layout.size)
        layout.pack_into(self._buf, self._len, value)
        self._len += layout.size

    def finalize(self) -> bytes:
        """Return exactly the bytes written so far, as an immutable snapshot."""
        return bytes(self._buf[:self._len])

    def reset(self) -> None:
        """Rewind the logical length; capacity is kept for the next message."""
        self._len = 0

    def _truncate(self, length: int) -> None:
        # Only ever moves backwards; used to undo a failed value write.
        if length < self._len:
            self._len = length


class ByteSource:
    """Bounded read cursor over a fixed buffer."""

    def __init__(self, data: BytesLike) -> None:
        self._buf = bytes(data)
        self._off = 0

    @property
    def offset(self) -> int:
        return self._off

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    @property
    def at_end(self) -> bool:
        return self._off >= len(self._buf)

    def require(self, n: int) -> None:
        """Raise OutOfBounds unless `n` more bytes are available."""
        if n < 0 or self._off + n > len(self._buf):
            raise OutOfBounds(
                "need {} byte(s) at offset {}, {} available".format(
                    n, self._off, len(self._buf) - self._off))

    def take(self, n: int) -> bytes:
        self.require(n)
        start = self._off
        self._off += n
        return self._buf[start:self._off]

    def skip(self, n: int) -> None:
        self.require(n)
        self._off += n

    def unpack(self, layout: struct.Struct):
        self.require(layout.size)
        (val,) = layout.unpack_from(self._buf, self._off)
        self._off += layout.size
        return val

    def rest(self) -> bytes:
        """Everything after the cursor.  Does not move it."""
        return self._buf[self._off:]

    def reset(self, data: Optional[BytesLike] = None) -> None:
        """Rewind to offset 0, optionally rebinding to a new input buffer."""
        if data is not None:
            self._buf = bytes(data)
        self._off = 0
