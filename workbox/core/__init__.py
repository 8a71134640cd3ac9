"""Core functionality for workbox."""

from .workbox import Workbox, find_repo_root

__all__ = ["Workbox", "find_repo_root"]
