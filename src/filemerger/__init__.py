"""
File Merger - bundle hand-picked project files into a single text file.

This package walks a directory tree, drops files matched by the patterns in
the project's ``.ignore`` file, lets the user pick which of the remaining
files to keep, and concatenates them into ``data.txt`` with a ``// path``
header in front of every file.
"""

__version__ = "0.1.0"
__author__ = "File Merger Team"
