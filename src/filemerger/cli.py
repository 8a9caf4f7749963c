"""
CLI entrypoint for filemerger package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .core import (
    DEFAULT_IGNORE_FILE,
    DEFAULT_OUTPUT,
    choose_files,
    choose_indices,
    list_files,
    load_ignore_patterns,
    validate_root,
    write_data_file,
    IgnoreFileError,
    InvalidDirectoryError,
    ListingError,
    OutputError,
    SelectionError,
)

def _byte_count(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid byte count: '{value}'")
    if n < 0:
        raise argparse.ArgumentTypeError(f"byte count must be non-negative, got {n}")
    return n


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="filemerger",
        description="Merge hand-picked project files into a single data.txt.",
    )
    p.add_argument("--root", help="Project root dir (prompted for when omitted)")
    p.add_argument(
        "--out",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Output file (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "--ignore-file",
        default=DEFAULT_IGNORE_FILE,
        help=f"Name of the ignore-pattern file inside the root (default: {DEFAULT_IGNORE_FILE})",
    )
    p.add_argument(
        "--select",
        help="Indices to merge, comma separated, or '*' for all (skips the prompt)",
    )
    p.add_argument(
        "--max-bytes",
        type=_byte_count,
        default=None,
        help="Maximum bytes per file to include (default: no limit)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _error(msg: str) -> None:
    print(Fore.RED + msg + Style.RESET_ALL, file=sys.stderr)


def _ask_root() -> str:
    try:
        return input("Enter project directory path: ").strip()
    except EOFError:
        return ""


def _run(ns: argparse.Namespace) -> None:
    try:
        root = validate_root(ns.root if ns.root is not None else _ask_root())
    except InvalidDirectoryError as e:
        if ns.verbose:
            print(f"[filemerger] {e}")
        _error("Invalid directory path.")
        return

    try:
        patterns = load_ignore_patterns(root, ns.ignore_file)
    except IgnoreFileError as e:
        _error(f"Error loading {ns.ignore_file}: {e}")
        return
    if ns.verbose:
        print(f"[filemerger] Loaded {len(patterns)} ignore patterns from {ns.ignore_file}")
        print(f"[filemerger] Scanning {root} …")

    try:
        files = list_files(root, patterns)
    except ListingError as e:
        _error(f"Error listing files: {e}")
        return
    if not files:
        print("No files found in the given directory.")
        return

    if ns.select is not None:
        chosen = [files[i] for i in choose_indices(ns.select, len(files))]
    else:
        try:
            chosen = choose_files(files)
        except SelectionError as e:
            _error(f"Error choosing files: {e}")
            return
    if not chosen:
        print("No files selected.")
        return
    if ns.verbose:
        print(f"[filemerger] {len(files)} files listed, {len(chosen)} selected.")

    try:
        write_data_file(
            root,
            chosen,
            out_path=ns.out,
            max_bytes=ns.max_bytes,
            verbose=ns.verbose,
        )
    except OutputError as e:
        _error(f"Error writing {ns.out}: {e}")
        return
    print(f"Data written to {ns.out}")


def main(argv: Optional[List[str]] = None) -> None:
    just_fix_windows_console()
    try:
        ns = _parse_args(argv)
        _run(ns)
    except KeyboardInterrupt:
        _error("\nCancelled.")
    except Exception as e:
        _error(f"Unexpected error: {e}")

if __name__ == "__main__":
    main()
