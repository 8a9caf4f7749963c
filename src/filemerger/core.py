"""
Core logic for filemerger package.
"""

from __future__ import annotations

import re
import stat
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Union

from colorama import Fore, Style

from .patterns import compile_patterns

# Exceptions
class FileMergerError(Exception): ...
class InvalidDirectoryError(FileMergerError): ...
class FileMergerIOError(FileMergerError, OSError): ...
class IgnoreFileError(FileMergerIOError): ...
class ListingError(FileMergerIOError): ...
class SelectionError(FileMergerIOError): ...
class OutputError(FileMergerIOError): ...

# Defaults & helpers
DEFAULT_IGNORE_FILE = ".ignore"
DEFAULT_OUTPUT = "data.txt"
SELECT_PROMPT = "Enter the indices of files to include (comma separated, * for all): "

_INDEX_RE = re.compile(r"[+-]?[0-9]+")


def _echo(msg: str, color: Optional[str] = None) -> None:
    msg = f"[filemerger] {msg}"
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg)


# Ignore-file utilities
def load_ignore_patterns(
    root: Union[str, Path], ignore_name: str = DEFAULT_IGNORE_FILE
) -> List[str]:
    ignore_path = Path(root) / ignore_name
    try:
        text = ignore_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as e:
        raise IgnoreFileError(f"Could not read ignore file '{ignore_path}': {e}") from e

    patterns: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


# File-scanning helpers
def validate_root(root: Union[str, Path]) -> Path:
    if isinstance(root, str) and not root.strip():
        raise InvalidDirectoryError("No directory path given")
    try:
        root = Path(root).resolve()
    except (OSError, RuntimeError, ValueError) as e:
        raise InvalidDirectoryError(f"Could not resolve root path '{root}': {e}") from e
    try:
        st = root.stat()
    except FileNotFoundError:
        raise InvalidDirectoryError(f"Root directory '{root}' does not exist")
    except (OSError, ValueError) as e:
        raise InvalidDirectoryError(f"Could not stat root path '{root}': {e}") from e
    if not stat.S_ISDIR(st.st_mode):
        raise InvalidDirectoryError(f"Root path '{root}' is not a directory")
    return root


def _walk(directory: Path) -> Iterator[Path]:
    # Symlinked directories are listed as entries, not descended into.
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            yield from _walk(entry)
        else:
            yield entry


def list_files(root: Union[str, Path], patterns: Sequence[str]) -> List[str]:
    """
    Return root-relative POSIX paths of every file under *root* that no
    pattern excludes, in depth-first lexical order.
    """
    root = Path(root)
    spec = compile_patterns(patterns)
    kept: List[str] = []
    try:
        for p in _walk(root):
            rel = p.relative_to(root).as_posix()
            if spec.match_file(rel):
                continue
            kept.append(rel)
    except OSError as e:
        raise ListingError(f"Could not scan directory '{root}': {e}") from e
    return kept


# Selection
def choose_indices(raw: str, count: int) -> List[int]:
    """
    Parse a selection line: ``*`` picks everything, otherwise a comma
    separated list of zero-based indices. Tokens that are not integers or
    fall outside ``[0, count)`` are dropped; order and repeats are kept.
    """
    raw = raw.strip()
    if raw == "*":
        return list(range(count))

    chosen: List[int] = []
    for token in raw.split(","):
        token = token.strip()
        if not _INDEX_RE.fullmatch(token):
            continue
        idx = int(token)
        if 0 <= idx < count:
            chosen.append(idx)
    return chosen


def choose_files(
    files: Sequence[str], prompt: Optional[Callable[[str], str]] = None
) -> List[str]:
    prompt = prompt or input
    print("Available files:")
    for idx, rel in enumerate(files):
        print(f"[{idx}] {rel}")

    try:
        raw = prompt(SELECT_PROMPT)
    except (EOFError, OSError) as e:
        reason = str(e) or "end of input"
        raise SelectionError(f"Could not read selection: {reason}") from e
    return [files[i] for i in choose_indices(raw, len(files))]


# Main writer
def write_data_file(
    root: Union[str, Path],
    chosen: Sequence[str],
    out_path: Union[str, Path],
    max_bytes: Optional[int] = None,
    verbose: bool = False,
) -> List[str]:
    """
    Write a ``// <path>`` header, the raw bytes and a blank line for every
    chosen file. Returns the paths that could not be read.
    """
    if max_bytes is not None and max_bytes < 0:
        raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")
    root = Path(root)
    try:
        out_path = Path(out_path).resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}") from e

    out_dir = out_path.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create output directory '{out_dir}': {e}") from e

    if verbose:
        _echo(f"Writing to {out_path} …")

    unreadable: List[str] = []
    bytes_written = 0
    try:
        with out_path.open("wb") as out_fh:
            for rel in chosen:
                out_fh.write(f"// {rel}\n".encode("utf-8", "surrogateescape"))
                try:
                    raw = (root / rel).read_bytes()
                except OSError as e:
                    unreadable.append(rel)
                    note = f"[Error reading {rel}: {e}]\n"
                    out_fh.write(note.encode("utf-8", "surrogateescape"))
                    if verbose:
                        _echo(f"! Could not read {rel}: {e}", Fore.YELLOW)
                else:
                    if max_bytes is not None and len(raw) > max_bytes:
                        out_fh.write(raw[:max_bytes])
                        out_fh.write(b"\n[truncated]")
                        bytes_written += max_bytes
                    else:
                        out_fh.write(raw)
                        bytes_written += len(raw)
                out_fh.write(b"\n\n")
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}") from e

    if verbose:
        _echo(
            f"Done → {out_path}. {len(chosen)} files processed, "
            f"{bytes_written} bytes written, {len(unreadable)} unreadable.",
            Fore.GREEN,
        )
    return unreadable
