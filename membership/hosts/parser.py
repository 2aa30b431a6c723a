"""Hosts file tokenizer.

A hosts file lists hostnames separated by any run of spaces, tabs, form-feeds,
carriage returns or newlines. A token starting with ``#`` opens a comment that
runs to the end of the line, swallowing every later token on that line.
Hostnames are kept verbatim: no case-folding, no DNS canonicalization.

IMPORT RULES:
  - `import re2` ONLY; `import re` is PROHIBITED in this package.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Optional

import re2

from membership.constants import COMMENT_PREFIX, HOSTS_FILE_ENCODING

# Separators recognised between hostnames on a single line.
_SEPARATOR_RE = re2.compile(r"[ \t\n\f\r]+")


def tokenize_line(line: str) -> Iterator[str]:
    """Yield the hostnames on one line, stopping at the first comment token.

    ``host#tag`` is a literal hostname; only a token whose stripped form
    *starts* with ``#`` begins a comment.
    """
    for token in _SEPARATOR_RE.split(line):
        if token.strip().startswith(COMMENT_PREFIX):
            return
        if token:
            yield token


def parse_hosts(lines: Iterable[str]) -> frozenset[str]:
    """Collect every hostname across ``lines`` into a set (duplicates collapse)."""
    hosts: set[str] = set()
    for line in lines:
        hosts.update(tokenize_line(line))
    return frozenset(hosts)


def read_hosts_file(path: str, encoding: str = HOSTS_FILE_ENCODING) -> Optional[frozenset[str]]:
    """Parse the hosts file at ``path``.

    Returns None when the file does not exist, so the caller can keep whatever
    set it already holds. Any other failure to open or decode the file
    propagates as OSError / UnicodeDecodeError.
    """
    try:
        fh = open(path, encoding=encoding)
    except (FileNotFoundError, NotADirectoryError):
        # A path under a regular file does not exist either.
        return None
    with fh:
        return parse_hosts(fh)
