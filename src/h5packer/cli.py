"""Command-line interface.

    h5packer pack <sourceDir> <destinationFile>
    h5packer unpack <archiveFile> <destinationDir>

Verbosity flags (-q, -v, -d) and --no-progress are accepted in any position.
Exit status is 0 on success and 1 for usage errors and failed operations.
"""

from __future__ import annotations

import sys
from typing import Any

from h5packer import __version__
from h5packer.archive import pack, unpack
from h5packer.core.config import ConfigResolver
from h5packer.core.errors import ArgumentError, H5PackerError
from h5packer.core.logging import VerbosityLevel, apply_logging_policy, get_logger, get_verbosity
from h5packer.progress import PackProgress

PROG = "h5packer"

PACK_USAGE = f"Usage: {PROG} pack <sourceDir> <destinationFile>"
UNPACK_USAGE = f"Usage: {PROG} unpack <archiveFile> <destinationDir>"

_VERBOSITY_FLAGS = {
    "-q": "quiet",
    "--quiet": "quiet",
    "-v": "verbose",
    "--verbose": "verbose",
    "-d": "debug",
    "--debug": "debug",
}

log = get_logger(__name__)


class CLI:
    """Dispatch one pack or unpack command."""

    def _split_options(self, argv: list[str]) -> tuple[list[str], dict[str, Any]]:
        """Separate option flags from positional arguments.

        Returns:
            (positional args, nested dict of CLI config overrides)
        """
        positional: list[str] = []
        cli_args: dict[str, Any] = {}
        for arg in argv:
            if arg in _VERBOSITY_FLAGS:
                cli_args.setdefault("logging", {})["level"] = _VERBOSITY_FLAGS[arg]
            elif arg == "--no-progress":
                cli_args.setdefault("progress", {})["enabled"] = False
            elif arg == "--no-color":
                cli_args.setdefault("logging", {})["color"] = False
            else:
                positional.append(arg)
        return positional, cli_args

    def run(self, argv: list[str]) -> int:
        args, cli_args = self._split_options(argv)

        try:
            resolver = ConfigResolver(cli_args=cli_args)
            apply_logging_policy(resolver.resolve_logging_policy())
        except H5PackerError as e:
            log.error(str(e))
            return 1
        log.debug(f"Parsed CLI args: {cli_args}")

        if not args or args[0] in ("help", "--help", "-h"):
            self._print_usage()
            return 1

        command = args[0]
        try:
            if command in ("pack", "repack"):
                return self._pack_command(args[1:], resolver)
            if command == "unpack":
                return self._unpack_command(args[1:], resolver)
        except ArgumentError as e:
            print(e.message)
            return 1
        except H5PackerError as e:
            log.error(str(e))
            return 1

        print("Invalid command.")
        self._print_usage()
        return 1

    def _pack_command(self, args: list[str], resolver: ConfigResolver) -> int:
        if len(args) != 2:
            raise ArgumentError(PACK_USAGE)
        source_dir, destination_file = args

        show_progress = (
            resolver.resolve_bool("progress.enabled", True)
            and get_verbosity() >= VerbosityLevel.NORMAL
        )
        with PackProgress(enabled=show_progress) as progress:
            pack(source_dir, destination_file, on_progress=progress, resolver=resolver)

        print(f"H5P archive created successfully: {destination_file}")
        return 0

    def _unpack_command(self, args: list[str], resolver: ConfigResolver) -> int:
        if len(args) != 2:
            raise ArgumentError(UNPACK_USAGE)
        archive_file, destination_dir = args

        unpack(archive_file, destination_dir, resolver=resolver)

        print(f"Archive extracted successfully to: {destination_dir}")
        return 0

    def _print_usage(self) -> None:
        print(f"h5packer {__version__}")
        print()
        print(f"Usage: {PROG} [pack|unpack] args...")
        print(f"  For unpacking: {PROG} unpack <archiveFile> <destinationDir>")
        print(f"  For repacking: {PROG} pack <sourceDir> <destinationFile>")
        print()
        print("Options:")
        print("  -q, --quiet                    Quiet mode (warnings and errors only)")
        print("  -v, --verbose                  Verbose mode (detailed info)")
        print("  -d, --debug                    Debug mode (everything)")
        print("  --no-progress                  Do not draw the progress bar")
        print("  --no-color                     Disable colored log output")
        print()
        print("Unpacking deletes everything already inside <destinationDir>.")


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    return CLI().run(sys.argv[1:] if argv is None else argv)
