"""Argument parsing functionality for tfenv."""

import argparse
import sys

from constants import Constants


def build_parser():
    """Build the top-level parser with one sub-command per action."""
    parser = argparse.ArgumentParser(
        prog="tfenv",
        description="Terraform / OpenTofu version manager",
        add_help=True,
    )
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: TFENV_LOG_LEVEL or INFO)",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    sub = parser.add_subparsers(dest="action")

    exec_p = sub.add_parser("exec", help="Run the selected version with the given arguments")
    exec_p.add_argument("EXEC_ARGS", nargs=argparse.REMAINDER,
                        help="Arguments passed through to the binary")

    sub.add_parser("version", help="Print the resolved version")

    use_p = sub.add_parser("use", help="Set the default version (writes <config_dir>/version)")
    use_p.add_argument("VERSION", help="Version to pin")

    install_p = sub.add_parser("install", help="Install a version (defaults to the resolved version)")
    install_p.add_argument("VERSION", nargs="?", default=None,
                           help="Exact version, 'latest', 'latest:<regex>', 'latest-allowed' or 'min-required'")

    sub.add_parser("list", help="List installed versions")

    remote_p = sub.add_parser("list-remote", help="List remotely available versions")
    remote_p.add_argument("PRODUCT", nargs="?", default=None,
                          type=str.lower,
                          choices=Constants.SUPPORTED_PRODUCTS,
                          help="Product to list (defaults to TFENV_PRODUCT)")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Everything after ``exec`` belongs to the managed binary, including
    tokens that look like options, so it is split off before parsing.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()
    if "exec" in argv:
        idx = argv.index("exec")
        ns = parser.parse_args(argv[:idx + 1])
        if ns.action == "exec":
            passthrough = argv[idx + 1:]
            if passthrough[:1] == ["--"]:
                passthrough = passthrough[1:]
            ns.EXEC_ARGS = passthrough
            return ns
    return parser.parse_args(argv)
