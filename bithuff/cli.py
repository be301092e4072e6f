# Copyright (c) 2025, The bithuff developers; All Rights Reserved
"""
Command line interface for compressing and decompressing files.
"""
import os
import sys
from optparse import OptionParser

from bithuff.bitio import BitInputStream, BitOutputStream
from bithuff.huffman import HuffProcessor, HuffException, write_dot, DEBUG_HIGH


def encode(filename, debug=0, dot=False):
    proc = HuffProcessor(debug)
    outname = filename + '.hf'
    with BitInputStream(filename) as inp:
        out = BitOutputStream(outname)
        try:
            proc.compress(inp, out)
        except BaseException:
            # no partial output
            out.close()
            os.unlink(outname)
            raise
        if dot:
            inp.reset()
            root = proc.make_tree_from_counts(proc.read_for_counts(inp))
            write_dot(root, filename + '.dot')

    nbits = 8 * os.path.getsize(filename)
    if nbits:
        print('Bits: %d / %d' % (out.bits_written, nbits))
        print('Ratio =%6.2f%%' % (100.0 * out.bits_written / nbits))

def decode(filename, debug=0):
    assert filename.endswith('.hf')

    outname = filename[:-3] + '.out'
    with BitInputStream(filename) as inp:
        out = BitOutputStream(outname)
        try:
            HuffProcessor(debug).decompress(inp, out)
        except HuffException:
            # no partial output
            out.close()
            os.unlink(outname)
            raise

def main(argv=None):
    p = OptionParser("usage: %prog [options] FILE")
    p.add_option(
        '-e', '--encode',
        action="store_true",
        help="encode (compress) FILE using the Huffman code calculated for "
             "the frequency of bytes in FILE itself. "
             "The output is FILE.hf which contains both the Huffman "
             "tree and the encoded bits.")
    p.add_option(
        '-d', '--decode',
        action="store_true",
        help="decode (decompress) FILE.hf and write the output to FILE.out")
    p.add_option(
        '-t', '--test',
        action="store_true",
        help="encode FILE, decode FILE.hf, compare FILE with FILE.out, "
             "and unlink created files.")
    p.add_option(
        '--dot',
        action="store_true",
        help="when encoding, also store the Huffman tree as FILE.dot")
    p.add_option(
        '-v', '--verbose',
        action="count",
        default=0,
        help="print statistics to stderr, twice (or more) to also print "
             "the Huffman code")
    opts, args = p.parse_args(argv)
    if len(args) != 1:
        p.error('exactly one argument required')
    filename = args[0]
    debug = opts.verbose if opts.verbose < 2 else DEBUG_HIGH

    try:
        if opts.encode:
            encode(filename, debug, opts.dot)

        elif opts.decode:
            decode(filename + '.hf', debug)

        elif opts.test:
            hf = filename + '.hf'
            out = filename + '.out'
            encode(filename, debug)
            try:
                decode(hf, debug)
            finally:
                os.unlink(hf)
            with open(filename, 'rb') as f1, open(out, 'rb') as f2:
                if f1.read() != f2.read():
                    sys.exit("bithuff: %s and %s differ" % (filename, out))
            os.unlink(out)

        else:
            p.error("no option provided")

    except HuffException as e:
        sys.exit("bithuff: %s" % e)


if __name__ == '__main__':
    main()
