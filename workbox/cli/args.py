"""Command-line argument parsing for workbox."""

import argparse
from typing import Optional, Sequence

from workbox.__version__ import __version__
from workbox.constants import TOOL_ALIAS, TOOL_NAME
from workbox.exceptions import UsageError

DESCRIPTION = "workbox manages Git worktree sandboxes with optional bootstrap steps."


class WorkboxArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(f"{message}. Run '{TOOL_NAME} --help' for usage.")


def _add_global_options(parser: argparse.ArgumentParser, suppress_defaults: bool) -> None:
    # Subparsers must not overwrite values already parsed before the subcommand
    default = argparse.SUPPRESS if suppress_defaults else False
    parser.add_argument("--json", action="store_true", default=default, help="Output machine-readable JSON")
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        default=default,
        help="Disable prompts and fail fast (also WORKBOX_NON_INTERACTIVE=1 or CI=1)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=default, help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", default=default, help="Show debug information for troubleshooting"
    )


def build_parser() -> WorkboxArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = WorkboxArgumentParser(
        prog=TOOL_NAME,
        description=DESCRIPTION,
        epilog=f"Alias: {TOOL_ALIAS}. Configure in .workbox/config.toml or workbox.toml at the repository root.",
    )
    parser.add_argument("--version", action="version", version=f"{TOOL_NAME} {__version__}")
    _add_global_options(parser, suppress_defaults=False)

    common = WorkboxArgumentParser(add_help=False)
    _add_global_options(common, suppress_defaults=True)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    new = subparsers.add_parser("new", parents=[common], help="Create a new sandbox worktree")
    new.add_argument("name", nargs="?", help="Worktree name")
    new.add_argument("--from", dest="base_ref", metavar="REF", help="Base ref (default: worktrees.base_ref)")

    rm = subparsers.add_parser("rm", parents=[common], help="Remove a sandbox worktree (never deletes its branch)")
    rm.add_argument("name", nargs="?", help="Worktree name")
    rm.add_argument("--force", action="store_true", help="Remove even with uncommitted changes")
    rm.add_argument("--unmanaged", action="store_true", help="Allow removing a worktree not on its workbox branch")

    subparsers.add_parser("list", parents=[common], help="List sandbox worktrees")

    status = subparsers.add_parser("status", parents=[common], help="Show whether sandboxes are clean")
    status.add_argument("name", nargs="?", help="Only this worktree")

    subparsers.add_parser("prune", parents=[common], help="Prune metadata of deleted worktrees")

    setup = subparsers.add_parser("setup", parents=[common], help="Run bootstrap steps")
    setup.add_argument("name", nargs="?", help="Worktree to bootstrap (default: repository root)")

    dev = subparsers.add_parser("dev", parents=[common], help="Start a dev session in a sandbox")
    dev.add_argument("name", nargs="?", help="Worktree name")

    exec_ = subparsers.add_parser(
        "exec", parents=[common], help="Run a command inside a sandbox", usage=f"{TOOL_NAME} exec <name> -- <command>"
    )
    exec_.add_argument("name", nargs="?", help="Worktree name")

    return parser


def split_passthrough(argv: Sequence[str]) -> tuple[list[str], Optional[list[str]]]:
    """Split argv at the first '--'. The tail is None when there is no separator."""
    argv = list(argv)
    if "--" not in argv:
        return argv, None
    index = argv.index("--")
    return argv[:index], argv[index + 1:]


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Anything after '--' is kept verbatim in `passthrough` (used by exec).

    Raises:
        UsageError: unknown flags, extra arguments, or exec without '--'
    """
    head, passthrough = split_passthrough(argv)
    parser = build_parser()
    args, extras = parser.parse_known_args(head)
    args.passthrough = passthrough

    # exec without '--' is reported before any stray arguments
    if args.command == "exec" and passthrough is None:
        raise UsageError(f"Missing command separator '--'. Usage: {TOOL_NAME} exec <name> -- <command>.")
    if extras:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command != "exec" and passthrough:
        raise UsageError(f"Unexpected arguments: {' '.join(passthrough)}")
    return args
