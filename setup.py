#!/usr/bin/env python3

import logging
import re
import os
import unittest

from setuptools import Command, setup
from setuptools.command.sdist import sdist


__version__ = os.getenv("VERSION", default=os.getenv("PVR", default="9999"))

cwd = os.getcwd()

# Python files that need `version = ""` subbed, relative to this dir:
python_scripts = [os.path.join(cwd, path) for path in ("aptselect/version.py",)]


class set_version(Command):
    """Set python version to our __version__."""

    description = "hardcode scripts' version using VERSION from environment"
    user_options = []  # [(long_name, short_name, desc),]

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        ver = "git" if __version__ == "9999" else __version__
        print("Setting version to %s" % ver)

        def sub(files, pattern):
            for f in files:
                updated_file = []
                with open(f, "r", 1, "utf_8") as s:
                    for line in s:
                        newline = re.sub(pattern, '"%s"' % ver, line, 1)
                        if newline != line:
                            logging.info(f"{f}: {newline}")
                        updated_file.append(newline)
                with open(f, "w", 1, "utf_8") as s:
                    s.writelines(updated_file)

        quote = r'[\'"]{1}'
        python_re = r"(?<=^version = )" + quote + "[^'\"]*" + quote
        sub(python_scripts, python_re)


class x_sdist(sdist):
    """sdist defaulting to archive files owned by root."""

    def finalize_options(self):
        if self.owner is None:
            self.owner = "root"
        if self.group is None:
            self.group = "root"

        sdist.finalize_options(self)


class TestCommand(Command):
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        suite = unittest.TestSuite()
        tests = unittest.defaultTestLoader.discover("tests")
        suite.addTests(tests)
        result = unittest.TextTestRunner(verbosity=2).run(suite)
        if result.errors or result.failures:
            raise SystemExit(1)


setup(
    name="aptselect",
    version=__version__,
    description="Tool for selecting the fastest Debian mirror "
    "and writing a sources.list",
    author="",
    author_email="",
    license="GPL-2.0-only",
    python_requires=">=3.8",
    packages=["aptselect"],
    install_requires=["requests"],
    scripts=(["bin/aptselect"]),
    cmdclass={
        "test": TestCommand,
        "sdist": x_sdist,
        "set_version": set_version,
    },
)
