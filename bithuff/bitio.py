# Copyright (c) 2025, The bithuff developers; All Rights Reserved
# bithuff is published under the PSF license.
#
# Author: The bithuff developers
"""
Bit-level input and output streams on top of binary files.

Both streams buffer bits in a big-endian bitarray, such that values are
read and written most significant bit first.
"""
import io

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

__all__ = ['BitInputStream', 'BitOutputStream']

# number of bytes read from / written to the underlying stream at once
CHUNK = 1 << 13


def _open(obj, mode):
    """
    Return tuple (file object, owned).  When given a path, the file is
    opened here and hence owned by the bit stream.
    """
    if isinstance(obj, str):
        return open(obj, mode), True
    if 'r' in mode and isinstance(obj, (bytes, bytearray, memoryview)):
        return io.BytesIO(obj), False
    return obj, False


class BitInputStream(object):
    """BitInputStream(source) -> BitInputStream

Return a bit reader for `source`, which is either a path, a bytes-like
object or a (seekable) binary file object.  Reading past the end of the
source is signaled by `read_bits()` returning -1.
"""
    def __init__(self, source):
        self.stream, self.owned = _open(source, 'rb')
        # reset() returns here, not to the start of the file
        self.start = self.stream.tell()
        self.buf = bitarray(0, 'big')
        self.pos = 0  # index of next bit in buf
        self.bits_read = 0

    def _fill(self, n):
        # make sure at least n bits are available in the buffer,
        # return False when the end of the stream is reached first
        while len(self.buf) - self.pos < n:
            chunk = self.stream.read(CHUNK)
            if not chunk:
                return False
            del self.buf[:self.pos]
            self.pos = 0
            self.buf.frombytes(chunk)
        return True

    def read_bits(self, n):
        """read_bits(n) -> int

Read `n` bits and return them as an unsigned integer, or -1 if fewer
than `n` bits are left.
"""
        if n < 0:
            raise ValueError("non-negative number of bits expected, got %d"
                             % n)
        if n == 0:
            return 0
        if not self._fill(n):
            # remaining bits are consumed
            self.pos = len(self.buf)
            return -1

        if n == 1:
            res = self.buf[self.pos]
        else:
            res = ba2int(self.buf[self.pos:self.pos + n])
        self.pos += n
        self.bits_read += n
        return res

    def read_bit(self):
        return self.read_bits(1)

    def reset(self):
        """
        Rewind to the position the underlying stream had when this
        BitInputStream was created.
        """
        self.stream.seek(self.start)
        self.buf.clear()
        self.pos = 0
        self.bits_read = 0

    def close(self):
        if self.owned:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class BitOutputStream(object):
    """BitOutputStream(sink) -> BitOutputStream

Return a bit writer for `sink`, which is either a path or a binary file
object.  The final byte is padded with zero bits by `close()`.
"""
    def __init__(self, sink):
        self.stream, self.owned = _open(sink, 'wb')
        self.buf = bitarray(0, 'big')
        self.bits_written = 0
        self.closed = False

    def _flush_bytes(self):
        # write all complete bytes in the buffer
        nbytes = len(self.buf) // 8
        if nbytes:
            self.stream.write(self.buf[:8 * nbytes].tobytes())
            del self.buf[:8 * nbytes]

    def write(self, a):
        """write(bitarray)

Append all bits of the bitarray (in order) to the stream.
"""
        if self.closed:
            raise ValueError("write to closed BitOutputStream")
        self.buf.extend(a)
        self.bits_written += len(a)
        if len(self.buf) >= 8 * CHUNK:
            self._flush_bytes()

    def write_bits(self, n, value):
        """write_bits(n, value)

Write the unsigned integer `value` using `n` bits, most significant bit
first.  Raises `OverflowError` if `value` does not fit into `n` bits.
"""
        if n == 0:
            return
        self.write(int2ba(value, n, 'big'))

    def close(self):
        """
        Pad the final byte with zero bits, write all remaining bits and
        flush.  The underlying stream is closed when it was opened here.
        """
        if self.closed:
            return
        self.buf.fill()
        self._flush_bytes()
        self.stream.flush()
        if self.owned:
            self.stream.close()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
