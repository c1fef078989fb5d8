from __future__ import annotations
import argparse
import json
import sys
from pydantic import ValidationError
from .errors import CONFIG_ERROR_EXIT_CODE, LauncherError
from .logging_setup import get_logger, setup_logging
from .orchestrator import Orchestrator
from .settings import Settings

log = get_logger("hytale.launcher.cli")

def _add_run_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--assets-path", dest="assets_path", help="Assets archive (default: server/Assets.zip)")
    p.add_argument("--bind", dest="bind_address", help="host:port the server binds to (default: 0.0.0.0:5000)")
    p.add_argument("--plugin-version", dest="plugin_version", help="Version suffix of the plugin jar to install")
    p.add_argument("--artifact", dest="plugin_artifact", help="Explicit plugin jar; skips scanning the build output")

def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hytale-launcher")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("build", help="Build the plugin with the configured build tool")

    run_p = sub.add_parser("run-server", help="Stage the runtime directory and run the server in the foreground")
    _add_run_options(run_p)
    run_p.add_argument("--build", action="store_true", help="Build the plugin before staging")
    run_p.add_argument("--dry-run", action="store_true", help="Print the plan as JSON; do not touch the filesystem")

    plan_p = sub.add_parser("plan", help="Print a dry-run plan as JSON and exit")
    _add_run_options(plan_p)
    return parser

def _overrides(args: argparse.Namespace) -> dict:
    keys = ("assets_path", "bind_address", "plugin_version", "plugin_artifact")
    return {k: getattr(args, k) for k in keys if getattr(args, k, None) is not None}

def _print_plan(orch: Orchestrator) -> int:
    plan = orch.plan().to_dict()
    print(json.dumps(plan, indent=2, ensure_ascii=False))
    return 0 if plan.get("ok", True) else 1

def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    try:
        settings = Settings(**_overrides(args))
    except ValidationError as e:
        sys.stderr.write(f"Invalid configuration:\n{e}\n")
        return CONFIG_ERROR_EXIT_CODE
    setup_logging(settings)

    orch = Orchestrator(settings)
    try:
        if args.cmd == "plan":
            return _print_plan(orch)

        if args.cmd == "build":
            orch.build()
            return 0

        if args.cmd == "run-server":
            if args.dry_run:
                return _print_plan(orch)
            if args.build:
                orch.build()
            return orch.start_server()
    except LauncherError as e:
        log.error("%s: %s", type(e).__name__, e)
        return e.exit_code

    return 2
