#!/usr/bin/env python
## -*- encoding: utf-8 -*-

import os
import sys
from setuptools import Command, setup
from codecs import open  # To open the README file with proper encoding

# Get information from separate files (README, VERSION)
def readfile(filename):
    with open(filename, encoding="utf-8") as f:
        return f.read()


# For the tests
class SageTest(Command):
    description = "run the doctests with sage -t"
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        errno = os.system("sage -t --force-lib diagonalFrobenius")
        if errno != 0:
            sys.exit(1)


setup(
    name="diagonalFrobenius",
    license="GNU General Public License, version 3",
    description="Sage code computing Frobenius on the cohomology of diagonal hypersurfaces over finite fields",
    long_description=readfile("README.md"),  # get the long description from the README
    long_description_content_type="text/markdown",
    version=readfile("VERSION").strip(),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License :: OSI Approved :: GNU General Public License, version 3",
        "Programming Language :: Python :: 3",
    ],
    keywords="sagemath p-adic frobenius diagonal hypersurface",
    install_requires=[
        "sagemath-standard",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=["diagonalFrobenius"],
    include_package_data=False,
    cmdclass={"test": SageTest},  # adding a special setup command for tests
)
