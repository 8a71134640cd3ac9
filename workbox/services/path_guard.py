"""Path containment checks for workbox.

Every directory workbox touches (the worktrees directory, the worktrees under
it, bootstrap step working directories) must stay inside a root directory even
after symlinks are followed. A single realpath() of the leaf is not enough: an
intermediate segment can be a symlink that points elsewhere, so each segment
between the root and the candidate is inspected with lstat() as well.
"""

import os
import stat
from dataclasses import dataclass
from typing import Optional

from workbox.exceptions import PathContainmentError
from workbox.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContainmentResult:
    """Outcome of a containment check."""

    ok: bool
    reason: Optional[str] = None


def is_subpath(candidate_path: str, base_path: str) -> bool:
    """Return True if candidate_path equals or lexically descends from base_path."""
    base = os.path.abspath(base_path)
    candidate = os.path.abspath(candidate_path)
    if candidate == base:
        return True
    base_with_sep = base if base.endswith(os.sep) else base + os.sep
    return candidate.startswith(base_with_sep)


def _realpath_or_abspath(path: str) -> str:
    if os.path.exists(path):
        return os.path.realpath(path)
    return os.path.abspath(path)


def _check_segments(root_real: str, rel: str, label: str) -> ContainmentResult:
    cursor = root_real
    segments = [segment for segment in rel.split(os.sep) if segment]

    for segment in segments:
        cursor = os.path.join(cursor, segment)
        try:
            st = os.lstat(cursor)
        except FileNotFoundError:
            # Nothing exists from here on; whoever creates it writes inside the root
            return ContainmentResult(ok=True)
        if stat.S_ISLNK(st.st_mode):
            target = os.path.realpath(cursor)
            if not is_subpath(target, root_real):
                return ContainmentResult(
                    ok=False,
                    reason=f"{label} escapes repo root via symlink ({cursor} -> {target}).",
                )

    return ContainmentResult(ok=True)


def check_path_within_root(root_dir: str, candidate_path: str, label: str) -> ContainmentResult:
    """
    Check that candidate_path cannot resolve outside root_dir.

    Args:
        root_dir: Trust boundary (usually the repository root)
        candidate_path: Path to certify
        label: Human-readable name used in the failure reason

    Returns:
        ContainmentResult with ok=False and a reason on failure
    """
    root_resolved = os.path.abspath(root_dir)
    root_real = _realpath_or_abspath(root_resolved)
    candidate_resolved = os.path.abspath(candidate_path)

    if not is_subpath(candidate_resolved, root_resolved):
        return ContainmentResult(
            ok=False,
            reason=f"{label} must be within repo root ({root_resolved}): {candidate_path}",
        )

    rel = os.path.relpath(candidate_resolved, root_resolved)
    if rel == os.curdir:
        return ContainmentResult(ok=True)

    segment_check = _check_segments(root_real, rel, label)
    if not segment_check.ok:
        return segment_check

    try:
        candidate_real = os.path.realpath(candidate_resolved, strict=True)
    except FileNotFoundError:
        return ContainmentResult(ok=True)

    if not is_subpath(candidate_real, root_real):
        return ContainmentResult(
            ok=False,
            reason=f"{label} must resolve within repo root ({root_real}): {candidate_path}",
        )

    return ContainmentResult(ok=True)


def ensure_path_within_root(root_dir: str, candidate_path: str, label: str) -> None:
    """Run check_path_within_root() and raise PathContainmentError on failure."""
    result = check_path_within_root(root_dir, candidate_path, label)
    if not result.ok:
        logger.debug(f"Containment check failed for {label}: {result.reason}")
        raise PathContainmentError(label, root_dir, candidate_path, result.reason or "")
