"""Parser for `git worktree list --porcelain` output.

Format (one block per worktree, blocks separated by blank lines):

    worktree /path/to/worktree
    HEAD <sha>
    branch refs/heads/<name>      (or: detached)
    locked [reason]               (optional)
    prunable [reason]             (optional)
"""

from dataclasses import dataclass
from typing import Optional

BRANCH_REF_NAMESPACE = "refs/heads/"


@dataclass
class PorcelainEntry:
    """One worktree block as reported by git."""

    path: str
    head: Optional[str] = None
    branch: Optional[str] = None
    # A block with neither a branch nor a detached line keeps detached=False
    detached: bool = False
    bare: bool = False
    locked: bool = False
    prunable: bool = False


class WorktreePorcelainParser:
    """Accumulate one block at a time and flush it when the next one starts."""

    def __init__(self):
        self._current: Optional[PorcelainEntry] = None
        self._entries: list[PorcelainEntry] = []

    def _flush(self) -> None:
        if self._current is not None:
            self._entries.append(self._current)
        self._current = None

    def feed(self, line: str) -> None:
        line = line.rstrip("\r\n")

        if line.startswith("worktree "):
            self._flush()
            self._current = PorcelainEntry(path=line[len("worktree "):])
            return

        # Lines outside a block (leading blanks, separators) carry nothing
        if self._current is None or not line:
            return

        keyword, _, value = line.partition(" ")
        if keyword == "HEAD":
            self._current.head = value or None
        elif keyword == "branch":
            if value.startswith(BRANCH_REF_NAMESPACE):
                value = value[len(BRANCH_REF_NAMESPACE):]
            self._current.branch = value or None
        elif keyword == "detached":
            self._current.detached = True
            self._current.branch = None
        elif keyword == "bare":
            self._current.bare = True
        elif keyword == "locked":
            self._current.locked = True
        elif keyword == "prunable":
            self._current.prunable = True

    def finish(self) -> list[PorcelainEntry]:
        """Flush the final block and return every entry seen."""
        self._flush()
        entries, self._entries = self._entries, []
        return entries


def parse_worktree_porcelain(output: str) -> list[PorcelainEntry]:
    """Parse the full porcelain listing into entries."""
    parser = WorktreePorcelainParser()
    for line in output.split("\n"):
        parser.feed(line)
    return parser.finish()
