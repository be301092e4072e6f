# Copyright (c) 2025, The bithuff developers; All Rights Reserved
# bithuff is published under the PSF license.
#
# Author: The bithuff developers
"""
Huffman compression of byte streams.

The compressed format is:

  * a 32-bit magic number (HUFF_TREE)
  * the Huffman tree, written in pre-order: a 0 bit for a parent node,
    and a 1 bit followed by the 9-bit symbol for a leaf node
  * the Huffman codes of all input bytes, followed by the code of
    PSEUDO_EOF, and zero padding to the next byte boundary

All values are written most significant bit first.
"""
import io
import sys
from heapq import heappush, heappop
from itertools import count

from bitarray import bitarray

from bithuff.bitio import BitInputStream, BitOutputStream


BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1

DEBUG_LOW = 1
DEBUG_HIGH = 4


class HuffException(ValueError):
    "Base class for errors raised while decompressing."


class FormatError(HuffException):
    "The input is not in the compressed format."


class TruncationError(HuffException):
    "The input ended before the tree header or the payload was complete."


class Node(object):
    """
    There are two types of Node instances (both have 'freq' attribute):
      * leaf node: has 'symbol' attribute
      * parent node: has 'child' attribute (tuple with both children)
    Nodes read from a tree header have their frequency set to None.
    """
    def __lt__(self, other):
        # heapq needs to be able to compare the nodes, nodes of equal
        # frequency are taken in the order they were pushed
        return (self.freq, self.seq) < (other.freq, other.seq)


def leaf_node(symbol, freq=None):
    nd = Node()
    nd.symbol = symbol
    nd.freq = freq
    return nd


def parent_node(left, right, freq=None):
    nd = Node()
    nd.child = left, right
    nd.freq = freq
    return nd


def huffman_tree(freq_map):
    """huffman_tree(dict, /) -> Node

Given a dict mapping symbols to their (non-zero) frequency, construct
a Huffman tree and return its root node.  Leaf nodes are pushed onto the
queue in ascending symbol order, and ties are broken by the order in which
nodes were pushed (first in, first out).  The first node taken from the
queue becomes the left child.  The root node is always a parent node:
a single symbol gets a zero frequency sibling.
"""
    if not freq_map:
        raise ValueError("cannot create Huffman tree with no symbols")

    seq = count()
    minheap = []
    # create all leaf nodes and push them onto the queue
    for sym in sorted(freq_map):
        nd = leaf_node(sym, freq_map[sym])
        nd.seq = next(seq)
        heappush(minheap, nd)

    if len(minheap) == 1:
        # a root leaf has no code, add a sibling such that the symbol
        # gets the code '0'
        nd = minheap[0]
        sibling = leaf_node(1 if nd.symbol == 0 else 0, 0)
        return parent_node(nd, sibling, nd.freq)

    # repeat the process until only one node remains
    while len(minheap) > 1:
        left = heappop(minheap)
        right = heappop(minheap)
        parent = parent_node(left, right, left.freq + right.freq)
        parent.seq = next(seq)
        heappush(minheap, parent)

    # the single remaining node is the root of the Huffman tree
    return minheap[0]


def huff_code(tree):
    """huff_code(Node, /) -> dict

Given a Huffman tree, traverse the tree and return the Huffman code, i.e.
a dictionary mapping symbols to (big-endian) bitarrays.
"""
    if hasattr(tree, 'symbol'):
        raise ValueError("cannot create code from a single leaf")

    result = {}

    def traverse(nd, prefix=bitarray(0, 'big')):
        try:                    # leaf
            result[nd.symbol] = prefix
        except AttributeError:  # parent, so traverse each child
            traverse(nd.child[0], prefix + bitarray('0', 'big'))
            traverse(nd.child[1], prefix + bitarray('1', 'big'))

    traverse(tree)
    return result


def disp_symbol(i):
    if i == PSEUDO_EOF:
        return 'EOF'
    special_ascii = {0: 'NUL', 9: 'TAB', 10: 'LF', 13: 'CR', 32: 'SPACE',
                     127: 'DEL'}
    if 32 < i < 127:
        return chr(i)
    return special_ascii.get(i, '')


def print_code(freq, codedict, stream=None):
    """
    Given a frequency table (indexed by symbol) and a codedict, print them
    in a readable form, most frequent symbols first.
    """
    if stream is None:
        stream = sys.stdout

    stream.write(' symbol    char     hex   frequency     Huffman code\n')
    stream.write(70 * '-' + '\n')
    for i in sorted(codedict, key=lambda c: (freq[c], c), reverse=True):
        stream.write('%7d    %-5s  0x%03x %10d     %s\n' % (
            i, disp_symbol(i), i, freq[i], codedict[i].to01()))


def write_dot(tree, fn):
    """
    Given a tree (which may or may not contain frequencies), write
    a graphviz '.dot' file with a visual representation of the tree.
    """
    def disp_sym(i):
        if i == PSEUDO_EOF:
            return 'EOF'
        return '0x%02x' % i

    def disp_freq(f):
        if f is None:
            return ''
        return '%d' % f

    def write_nd(fo, nd):
        if hasattr(nd, 'symbol'):  # leaf node
            a, b = disp_freq(nd.freq), disp_sym(nd.symbol)
            fo.write('  %d  [label="%s%s%s"];\n' %
                     (id(nd), a, ': ' if a else '', b))
            return

        fo.write('  %d  [shape=circle, style=filled, '
                 'fillcolor=grey, label="%s"];\n' %
                 (id(nd), disp_freq(nd.freq)))

        for k in range(2):
            fo.write('  %d->%d;\n' % (id(nd), id(nd.child[k])))

        for k in range(2):
            write_nd(fo, nd.child[k])

    with open(fn, 'w') as fo:    # dot -Tpng tree.dot -O
        fo.write('digraph BT {\n')
        fo.write('  node [shape=box, fontsize=20, fontname="Arial"];\n')
        write_nd(fo, tree)
        fo.write('}\n')


class HuffProcessor(object):
    """HuffProcessor(debug=0, stream=None) -> HuffProcessor

Compress and decompress bit streams.  When `debug` is at least DEBUG_LOW,
a summary of each operation is printed to `stream` (defaults to
`sys.stderr`), and with DEBUG_HIGH also the Huffman code, or the leaves
of the tree header when decompressing.
"""
    def __init__(self, debug=0, stream=None):
        self.debug = debug
        self.stream = stream

    def out_stream(self):
        return sys.stderr if self.stream is None else self.stream

    def log(self, level, fmt, *args):
        if self.debug >= level:
            self.out_stream().write(fmt % args + "\n")

    # ------------------------------ compression ----------------------------

    def compress(self, inp, out):
        """compress(BitInputStream, BitOutputStream)

Read `inp` twice (counting, then encoding), and write the compressed
format to `out`.  `out` is closed afterwards.
"""
        counts = self.read_for_counts(inp)
        root = self.make_tree_from_counts(counts)
        codings = self.make_codings_from_tree(root)
        if self.debug >= DEBUG_HIGH:
            print_code(counts, codings, self.out_stream())

        out.write_bits(BITS_PER_INT, HUFF_TREE)
        self.write_header(root, out)
        header_bits = out.bits_written - BITS_PER_INT

        inp.reset()
        self.write_compressed_bits(codings, inp, out)
        out.close()

        self.log(DEBUG_LOW, 'compress: %d symbols, header: %d bits, '
                 'bits read: %d, bits written: %d', len(codings),
                 header_bits, inp.bits_read, out.bits_written)

    def read_for_counts(self, inp):
        """
        Return list of frequencies indexed by symbol, including PSEUDO_EOF,
        whose frequency is always 1.
        """
        freq = (ALPH_SIZE + 1) * [0]
        while True:
            val = inp.read_bits(BITS_PER_WORD)
            if val == -1:
                break
            freq[val] += 1
        freq[PSEUDO_EOF] = 1
        return freq

    def make_tree_from_counts(self, freq):
        return huffman_tree({i: f for i, f in enumerate(freq) if f > 0})

    def make_codings_from_tree(self, root):
        return huff_code(root)

    def write_header(self, root, out):
        if hasattr(root, 'symbol'):
            out.write_bits(1, 1)
            out.write_bits(BITS_PER_WORD + 1, root.symbol)
        else:
            out.write_bits(1, 0)
            self.write_header(root.child[0], out)
            self.write_header(root.child[1], out)

    def write_compressed_bits(self, codings, inp, out):
        while True:
            val = inp.read_bits(BITS_PER_WORD)
            if val == -1:
                break
            out.write(codings[val])
        out.write(codings[PSEUDO_EOF])

    # ----------------------------- decompression ---------------------------

    def decompress(self, inp, out):
        """decompress(BitInputStream, BitOutputStream)

Read the compressed format from `inp` and write the original bytes to
`out`, which is closed afterwards.  Raises FormatError when `inp` does not
start with the magic number and TruncationError when `inp` ends early.
"""
        bits = inp.read_bits(BITS_PER_INT)
        if bits != HUFF_TREE:
            raise FormatError("illegal header starts with 0x%x" % bits
                              if bits != -1 else "missing magic number")

        root = self.read_tree_header(inp)
        if hasattr(root, 'symbol'):
            raise FormatError("tree header consists of a single leaf")
        header_bits = inp.bits_read - BITS_PER_INT

        self.read_compressed_bits(root, inp, out)
        out.close()

        self.log(DEBUG_LOW, 'decompress: header: %d bits, '
                 'bits read: %d, bits written: %d',
                 header_bits, inp.bits_read, out.bits_written)

    def read_tree_header(self, inp, depth=0):
        # no tree with ALPH_SIZE + 1 leaves is deeper than ALPH_SIZE
        if depth > ALPH_SIZE:
            raise FormatError("tree header exceeds depth %d" % ALPH_SIZE)

        bit = inp.read_bits(1)
        if bit == -1:
            raise TruncationError("end of input while reading tree header")
        if bit == 0:
            left = self.read_tree_header(inp, depth + 1)
            right = self.read_tree_header(inp, depth + 1)
            return parent_node(left, right)

        symbol = inp.read_bits(BITS_PER_WORD + 1)
        if symbol == -1:
            raise TruncationError("end of input while reading leaf symbol")
        if symbol > PSEUDO_EOF:
            raise FormatError("invalid symbol in tree header: %d" % symbol)
        self.log(DEBUG_HIGH, 'leaf: %d (%s) at depth %d',
                 symbol, disp_symbol(symbol), depth)
        return leaf_node(symbol)

    def read_compressed_bits(self, root, inp, out):
        current = root
        while True:
            bit = inp.read_bits(1)
            if bit == -1:
                raise TruncationError("end of input before PSEUDO_EOF")

            current = current.child[bit]
            try:
                symbol = current.symbol
            except AttributeError:  # parent node
                continue

            if symbol == PSEUDO_EOF:
                break
            out.write_bits(BITS_PER_WORD, symbol)
            current = root


def compress_bytes(data, debug=0):
    """compress_bytes(bytes, /, debug=0) -> bytes

Return the compressed representation of `data`.
"""
    fo = io.BytesIO()
    HuffProcessor(debug).compress(BitInputStream(data), BitOutputStream(fo))
    return fo.getvalue()


def decompress_bytes(blob, debug=0):
    """decompress_bytes(bytes, /, debug=0) -> bytes

Return the original data of the compressed representation `blob`.
"""
    fo = io.BytesIO()
    HuffProcessor(debug).decompress(BitInputStream(blob), BitOutputStream(fo))
    return fo.getvalue()
