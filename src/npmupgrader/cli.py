import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    BUNDLED_SCRIPT_PATH,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DNS_HOST,
    DEFAULT_NPM_COMMAND,
    DEFAULT_POWERSHELL_COMMAND,
)
from .core import NpmUpgrader, UpgraderError
from .models import UpgradeSettings
from .options import parse_options
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(config, verbose, log_file, args):
    """Upgrade npm on Windows.

    Pass --version:<version> to skip the interactive version list, e.g.
    npm-windows-upgrade --version:3.0.0
    """
    logger = logging.getLogger("npmupgrader")

    try:
        options = parse_options(args, verbose=verbose, log_file=log_file, config=config)
    except UpgraderError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        config_loader = ConfigLoader()
        resolved_config = options.config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except UpgraderError as exc:
        raise click.ClickException(str(exc)) from exc

    version = _resolve_option(options.version, config_values, "version")
    verbose = bool(_resolve_option(options.verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(options.log_file, config_values, "log_file")

    settings = UpgradeSettings(
        npm_command=_resolve_option(None, config_values, "npm_command", DEFAULT_NPM_COMMAND),
        powershell_command=_resolve_option(
            None, config_values, "powershell_command", DEFAULT_POWERSHELL_COMMAND
        ),
        script_path=_resolve_option(None, config_values, "script_path", BUNDLED_SCRIPT_PATH),
        dns_host=_resolve_option(None, config_values, "dns_host", DEFAULT_DNS_HOST),
        install_path=_resolve_option(None, config_values, "install_path"),
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    upgrader = NpmUpgrader(settings=settings, target_version=version)

    try:
        exit_code = upgrader.run()
    except UpgraderError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
