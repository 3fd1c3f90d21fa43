"""tfenv - Terraform / OpenTofu version manager

    Returns:
        int: Exit code
"""
import logging
import sys

from args import build_parser, parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from errors import ConfigError, TfenvError
from settings import load_settings
import cli_commands

__version__ = "0.4.0"


def dispatch(args, settings):
    """Route a parsed namespace to its command handler."""
    action = args.action
    if action == "exec":
        return cli_commands.run_exec(settings, list(args.EXEC_ARGS or []))
    if action == "version":
        return cli_commands.print_version(settings)
    if action == "use":
        return cli_commands.set_default_version(settings, args.VERSION)
    if action == "install":
        return cli_commands.install(settings, args.VERSION)
    if action == "list":
        return cli_commands.list_installed(settings)
    if action == "list-remote":
        return cli_commands.list_remote(settings, args.PRODUCT)
    print(f"tfenv {__version__}")
    build_parser().print_help()
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    configure_logging(getattr(args, "LOG_LEVEL", None), getattr(args, "LOG_FILE", None))

    try:
        settings = load_settings()
    except ConfigError as e:
        logging.error("%s", e)
        return ExitCodes.CONFIG_ERROR.value

    # The config file may carry its own level; the CLI flag still wins
    if not getattr(args, "LOG_LEVEL", None):
        logging.getLogger().setLevel(getattr(logging, settings.log_level, logging.INFO))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.action,
                product=settings.product.name,
            ),
        )

    try:
        return dispatch(args, settings)
    except TfenvError as e:
        logging.error("%s", e)
        return e.exit_code.value
    except KeyboardInterrupt:
        return 130


def run():
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
