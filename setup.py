import re
import sys


if sys.version_info[0] == 2:
    sys.exit("""\
****************************************************************************
*   bithuff requires Python 3.
****************************************************************************
""")

if "test" in sys.argv:
    import bithuff
    # when test was successful, return 0 (hence not)
    sys.exit(not bithuff.test().wasSuccessful())

from setuptools import setup


kwds = {}
try:
    kwds['long_description'] = open('README.rst').read()
except IOError:
    pass

# Read version from bithuff/__init__.py
pat = re.compile(r"^__version__\s*=\s*'(\S+)'", re.M)
data = open('bithuff/__init__.py').read()
kwds['version'] = pat.search(data).group(1)

setup(
    name = "bithuff",
    author = "The bithuff developers",
    license = "PSF-2.0",
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Archiving :: Compression",
        "Topic :: Utilities",
    ],
    description = "Huffman compression of byte streams, using bitarray",
    packages = ["bithuff"],
    install_requires = ["bitarray>=2.3"],
    extras_require = {"test": ["pytest"]},
    entry_points = {
        "console_scripts": ["bithuff = bithuff.cli:main"],
    },
    zip_safe = False,
    **kwds
)
