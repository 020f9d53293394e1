"""CLI entrypoint for prnotify."""

from __future__ import annotations

from prnotify.commands import run as run_command
from prnotify.commands import snapshot as snapshot_command
from prnotify.commands.common import normalize_command
from prnotify.commands.parser import build_parser
from prnotify.logging_utils import configure_logging
from prnotify.services.command_runtime import CommandRuntime, default_runtime

COMMANDS = {
    "run": run_command.run,
    "snapshot": snapshot_command.run,
}


def main(argv: list[str] | None = None, *, runtime: CommandRuntime | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    handler = COMMANDS.get(normalize_command(args.command))
    if handler is None:
        parser.print_help()
        return 1
    return handler(args, runtime=runtime or default_runtime())


if __name__ == "__main__":
    raise SystemExit(main())
