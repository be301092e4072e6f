# Copyright (c) 2025, The bithuff developers; All Rights Reserved
"""
This package compresses byte streams using Huffman codes.  The Huffman
tree is stored in the compressed output itself, such that decompression
requires no other information.

Author: The bithuff developers
"""
from bithuff.bitio import BitInputStream, BitOutputStream
from bithuff.huffman import (
    HuffProcessor, HuffException, FormatError, TruncationError,
    compress_bytes, decompress_bytes,
    BITS_PER_WORD, BITS_PER_INT, ALPH_SIZE, PSEUDO_EOF,
    HUFF_NUMBER, HUFF_TREE, DEBUG_LOW, DEBUG_HIGH,
)

__version__ = '1.0.0'

__all__ = ['BitInputStream', 'BitOutputStream',
           'HuffProcessor', 'HuffException', 'FormatError', 'TruncationError',
           'compress_bytes', 'decompress_bytes']


def test(verbosity=1):
    """test(verbosity=1) -> TextTestResult

Run self-test, and return `unittest.runner.TextTestResult` object.
"""
    from bithuff import test_huffman
    return test_huffman.run(verbosity=verbosity)
