from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, configuration merging
(defaults, config file, CLI overrides), logging bootstrap, unpack execution
and result rendering.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from gluaunpack.core.pipeline.engine import run_unpack
from gluaunpack.core.pipeline.validator import validate_config
from gluaunpack.domain.config import get_default_config, load_config
from gluaunpack.domain.errors import UnpackingError
from gluaunpack.domain.unpack_models import UnpackResult
from gluaunpack.infra.fs import normalize_path
from gluaunpack.infra.logging import LoggingConfig, configure_logging, get_logger
from gluaunpack.interface.cli import args as cli_args
from gluaunpack.utils.i18n import i18n

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional argument list. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 unpack failure, 2 usage error,
        130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    if args.no_copy and args.output_path:
        print(f"ERROR: {i18n.t('cli.errors.no_copy_with_out')}", file=sys.stderr)
        return 2

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)
    conf["addon_path"] = normalize_path(conf["addon_path"], os.getcwd())
    for key in ("output_path", "log_file"):
        if conf[key]:
            conf[key] = normalize_path(conf[key], os.getcwd())

    configure_logging(
        LoggingConfig(
            level="DEBUG" if args.debug else "INFO",
            console=True,
            console_level="WARNING" if conf["quiet"] and not args.debug else None,
            log_file=conf["log_file"],
        ),
        force=True,
    )

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return 0

    addon_path = conf["addon_path"]
    if not os.path.isdir(addon_path):
        msg = i18n.t("cli.errors.path_not_exist", path=addon_path)
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    try:
        result = run_unpack(addon_path, conf["output_path"], no_copy=conf["no_copy"])
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except UnpackingError as e:
        msg = i18n.t("cli.errors.unpack_fail", error=str(e))
        logger.debug(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 1

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)
    return 0


def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of the non-None overrides into base."""
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out


def _print_human_summary(result: UnpackResult) -> None:
    print(i18n.t("cli.status.success"))
    print(i18n.t("cli.status.output_dir", path=result.output_path))
    print(i18n.t(
        "cli.status.summary",
        files=result.unpacked_files,
        containers=result.packed_files,
        elapsed=result.elapsed,
    ))


if __name__ == "__main__":
    sys.exit(main())
