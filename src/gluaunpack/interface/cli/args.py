from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides.
"""

import argparse
from typing import Any, Dict

from gluaunpack.domain import constants as const
from gluaunpack.utils.i18n import i18n


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the gluaunpack CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=const.APP_NAME,
        description=i18n.t("app.description"),
    )

    # --- Paths ---
    p.add_argument(
        "addon_path",
        nargs="?",
        default=None,
        help=i18n.t("cli.args.addon"),
    )
    p.add_argument(
        "-o", "--out",
        dest="output_path",
        default=None,
        help=i18n.t("cli.args.out"),
    )

    # --- Mode ---
    p.add_argument(
        "--no-copy",
        action="store_true",
        help=i18n.t("cli.args.no_copy"),
    )

    # --- Output and Diagnostics ---
    p.add_argument("-q", "--quiet", action="store_true", help=i18n.t("cli.args.quiet"))
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))
    p.add_argument("--json", dest="json_output", action="store_true", help=i18n.t("cli.args.json"))
    p.add_argument("--log-file", dest="log_file", default=None, help=i18n.t("cli.args.log_file"))

    # --- Configuration ---
    p.add_argument("--use-defaults", action="store_true", help=i18n.t("cli.args.defaults"))
    p.add_argument("--dump-config", action="store_true", help=i18n.t("cli.args.dump"))

    p.add_argument("--version", action="version", version=f"%(prog)s {const.APP_VERSION}")

    return p


def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags that were not given map to None (or are omitted) so they do not
    shadow values from the configuration file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "addon_path": args.addon_path,
        "output_path": args.output_path,
        "log_file": args.log_file,
    }
    if args.no_copy:
        overrides["no_copy"] = True
    if args.quiet:
        overrides["quiet"] = True
    return overrides
