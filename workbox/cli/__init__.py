"""CLI module for workbox"""

from .args import parse_args
from .main import main

__all__ = ["main", "parse_args"]
