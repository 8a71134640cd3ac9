"""Command-line interface for workbox"""

import os
import sys
from typing import Optional, Sequence

from rich.console import Console

from workbox.cli.args import build_parser, parse_args
from workbox.config import CliFlags
from workbox.core import Workbox
from workbox.exceptions import WorkboxError
from workbox.models.bootstrap import CommandResult
from workbox.services.display_service import DisplayService
from workbox.utils.logging import get_logger, setup_logging

err_console = Console(stderr=True)
logger = get_logger(__name__)


def dispatch(workbox: Workbox, args) -> CommandResult:
    """Call the Workbox handler for the parsed subcommand."""
    if args.command == "new":
        return workbox.new(args.name, base_ref=args.base_ref)
    if args.command == "rm":
        return workbox.remove(args.name, force=args.force, unmanaged=args.unmanaged)
    if args.command == "list":
        return workbox.list_worktrees()
    if args.command == "status":
        return workbox.status(args.name)
    if args.command == "prune":
        return workbox.prune()
    if args.command == "setup":
        return workbox.setup(args.name)
    if args.command == "dev":
        return workbox.dev(args.name)
    if args.command == "exec":
        return workbox.exec(args.name, args.passthrough or [])
    raise WorkboxError(f'Unknown command "{args.command}".')


def main(argv: Optional[Sequence[str]] = None, cwd: Optional[str] = None) -> int:
    """Main entry point for the application."""
    argv = list(sys.argv[1:] if argv is None else argv)
    # Decide the error format before parsing, so usage errors honour --json too
    display = DisplayService(mode="json" if "--json" in argv else "text")
    debug = "--debug" in argv

    try:
        args = parse_args(argv)
        debug = args.debug
        flags = CliFlags.from_env(
            json=args.json,
            non_interactive=args.non_interactive,
            verbose=args.verbose,
            debug=args.debug,
        )
        setup_logging(verbose=flags.verbose, debug=flags.debug)
        display = DisplayService(mode="json" if flags.json else "text", show_legend=flags.verbose)

        if args.command is None:
            display.render_help(build_parser().format_help())
            return 0

        workbox = Workbox.from_cwd(cwd or os.getcwd(), flags)

        if flags.debug:
            err_console.print("[yellow]Debug mode enabled[/yellow]")
            err_console.print(f"  Repository: {workbox.repo_root}", markup=False)
            for section, value in workbox.config.to_dict().items():
                err_console.print(f"  {section}: {value}", markup=False)

        result = dispatch(workbox, args)
        display.render_result(args.command, result)
        return result.exit_code
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorkboxError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        display.render_error(str(e))
        return e.exit_code
    except Exception as e:
        display.render_error(str(e))
        if debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
