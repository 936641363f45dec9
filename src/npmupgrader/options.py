"""Command-line argument parsing for npm-windows-upgrade."""

from typing import Optional, Sequence

from npmupgrader.errors import UpgraderError
from npmupgrader.models import UpgradeOptions

VERSION_FLAG_PREFIX = "--version:"


def parse_options(
    args: Sequence[str],
    verbose: Optional[bool] = None,
    log_file: Optional[str] = None,
    config: Optional[str] = None,
) -> UpgradeOptions:
    """Builds typed options from the raw arguments left over by click.

    The only positional-style argument accepted is ``--version:<value>``.
    When it is given more than once, the last occurrence wins.
    """
    version = None
    for arg in args:
        if not arg.startswith(VERSION_FLAG_PREFIX):
            raise UpgraderError(
                f"Unknown argument: {arg}. Usage: npm-windows-upgrade [--version:<version>]"
            )

        value = arg[len(VERSION_FLAG_PREFIX):].strip()
        if not value:
            raise UpgraderError("The --version: flag requires a value, e.g. --version:3.0.0")
        version = value

    return UpgradeOptions(version=version, verbose=verbose, log_file=log_file, config=config)
