from __future__ import annotations
import logging
import os
from typing import Iterable, Iterator, List, Optional, Tuple
from .config import PROGRESS_EVERY_LINES, PROGRESS_EVERY_FILES

log = logging.getLogger(__name__)

# Progress printing (set SPELLCORE_VERBOSE=1 to enable)
def _verbose() -> bool:
    return os.environ.get("SPELLCORE_VERBOSE") == "1"


def parse_dictionary_line(
    line: str,
    term_index: int = 0,
    count_index: int = 1,
    separator: Optional[str] = None,
) -> Optional[Tuple[str, int]]:
    """
    Parse one "term count" line. Returns None for blank/short lines or a non-integer count.
    separator=None splits on any run of whitespace.
    """
    parts = line.rstrip("\r\n").split(separator)
    if len(parts) <= max(term_index, count_index):
        return None
    term = parts[term_index]
    if separator is None:
        term = term.strip()
    if not term:
        return None
    try:
        count = int(parts[count_index].strip())
    except ValueError:
        return None
    return term, count


def _iter_dictionary_files(paths: Iterable[str]) -> Iterator[str]:
    """Yield files as given; walk directories recursively for *.txt (sorted)."""
    for p in paths:
        p = os.path.abspath(p)
        if os.path.isdir(p):
            for dirpath, dirnames, filenames in os.walk(p):
                dirnames.sort()
                for fn in sorted(filenames):
                    if fn.lower().endswith(".txt"):
                        yield os.path.join(dirpath, fn)
        elif os.path.isfile(p):
            yield p
        else:
            raise FileNotFoundError(p)


def load_dictionary(
    path: str,
    *,
    term_index: int = 0,
    count_index: int = 1,
    separator: Optional[str] = None,
) -> Iterator[Tuple[str, int]]:
    """Stream (term, count) pairs from one UTF-8 frequency dictionary file."""
    verbose = _verbose()
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        for line_no, line in enumerate(f, 1):
            pair = parse_dictionary_line(line, term_index, count_index, separator)
            if pair is None:
                if line.strip():
                    log.debug("%s:%d: skipped malformed line %r", path, line_no, line.rstrip())
                continue
            if verbose and line_no % PROGRESS_EVERY_LINES == 0:
                print(f"[load] {path}: {line_no:,} lines")
            yield pair


def load_dictionaries(
    paths: Iterable[str],
    *,
    term_index: int = 0,
    count_index: int = 1,
    separator: Optional[str] = None,
) -> Iterator[Tuple[str, int]]:
    """Stream (term, count) pairs from files and/or folders of *.txt dictionaries."""
    verbose = _verbose()
    files: List[str] = list(_iter_dictionary_files(paths))
    if verbose:
        print(f"[load] {len(files)} dictionary file(s)")
    for n, path in enumerate(files, 1):
        yield from load_dictionary(
            path, term_index=term_index, count_index=count_index, separator=separator
        )
        if verbose and (n % PROGRESS_EVERY_FILES == 0 or n == len(files)):
            print(f"[load] files done: {n:,}/{len(files):,}")
