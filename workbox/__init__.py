"""
workbox - Named Git worktree sandboxes with optional bootstrap steps
"""

from .__version__ import __version__
from .core import Workbox
from .cli.main import main

__all__ = ["Workbox", "main", "__version__"]
