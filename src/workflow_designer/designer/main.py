"""CLI entrypoint for the workflow designer.

Commands work on exported workflow files, so a workflow drawn in the UI can
be checked from a terminal or CI job.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from workflow_designer import __version__
from workflow_designer.designer.catalog import (
    AutomationCatalog,
    CatalogError,
    catalog_from_settings,
    load_catalog_file,
)
from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.graph.models import StepStatus
from workflow_designer.designer.graph.simulator import simulate_workflow
from workflow_designer.designer.graph.validator import validate_workflow_structure
from workflow_designer.designer.logging import configure_logging
from workflow_designer.designer.workflow_file import (
    InvalidWorkflowFile,
    default_export_filename,
    read_workflow_file,
    write_workflow_file,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-designer",
        description="Validate and simulate workflow designer files",
    )
    parser.add_argument(
        "--version", action="version", version=f"workflow-designer {__version__}"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of text",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Run structural validation on a file")
    validate.add_argument("path", type=Path, help="Exported workflow JSON file")

    simulate = subparsers.add_parser("simulate", help="Simulate a workflow file")
    simulate.add_argument("path", type=Path, help="Exported workflow JSON file")
    simulate.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Automation catalog JSON file (defaults to DESIGNER_CATALOG_PATH or built-ins)",
    )

    automations = subparsers.add_parser("automations", help="List available automation actions")
    automations.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Automation catalog JSON file (defaults to DESIGNER_CATALOG_PATH or built-ins)",
    )

    normalize = subparsers.add_parser(
        "normalize",
        help="Re-export a workflow file in the canonical format (drops validation tags)",
    )
    normalize.add_argument("path", type=Path, help="Exported workflow JSON file")
    normalize.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Destination file (defaults to DESIGNER_EXPORT_DIR/workflow-<ms>.json)",
    )

    serve = subparsers.add_parser("serve", help="Run the designer REST API")
    serve.add_argument("--host", default=None, help="Bind address (defaults to DESIGNER_HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (defaults to DESIGNER_PORT)"
    )

    return parser


def _resolve_catalog(path: Path | None, settings: DesignerSettings) -> AutomationCatalog:
    if path is not None:
        return load_catalog_file(path)
    return catalog_from_settings(settings.catalog_path)


def _cmd_validate(args: argparse.Namespace) -> int:
    document = read_workflow_file(args.path)
    result = validate_workflow_structure(document.nodes, document.edges)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        for error in result.globalErrors:
            print(f"error: {error}")
        for entry in result.nodeValidation:
            for error in entry.errors:
                print(f"{entry.nodeId}: {error}")
        if result.is_clean:
            print(f"OK: {len(document.nodes)} nodes, {len(document.edges)} edges")

    return 0 if result.is_clean else 1


def _cmd_simulate(args: argparse.Namespace, settings: DesignerSettings) -> int:
    document = read_workflow_file(args.path)
    catalog = _resolve_catalog(args.catalog, settings)
    result = simulate_workflow(document.nodes, document.edges, catalog.actions)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        for error in result.errors:
            print(f"error: {error}")
        for step in result.steps:
            print(f"[{step.status.value}] {step.step} ({step.nodeId})")

    failed = any(s.status == StepStatus.ERROR for s in result.steps)
    return 0 if result.valid and not failed else 1


def _cmd_automations(args: argparse.Namespace, settings: DesignerSettings) -> int:
    catalog = _resolve_catalog(args.catalog, settings)
    actions = catalog.list_automations()
    if args.json:
        print(json.dumps([a.model_dump(mode="json") for a in actions], indent=2))
    else:
        for action in actions:
            print(f"{action.id}: {action.label} ({', '.join(action.requiredParams)})")
    return 0


def _cmd_normalize(args: argparse.Namespace, settings: DesignerSettings) -> int:
    document = read_workflow_file(args.path)
    output = args.output or settings.export_dir / default_export_filename()
    written = write_workflow_file(output, document.nodes, document.edges)
    logger.info("Workflow exported", extra={"path": str(written)})
    print(f"Wrote {written}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from workflow_designer.server.app import create_app
    from workflow_designer.server.config import ServerSettings

    server_settings = ServerSettings()
    # One worker only: the workflow store lives in-process.
    uvicorn.run(
        create_app(),
        host=args.host or server_settings.host,
        port=args.port or server_settings.port,
        workers=1,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = DesignerSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "validate":
            return _cmd_validate(args)
        if args.command == "simulate":
            return _cmd_simulate(args, settings)
        if args.command == "automations":
            return _cmd_automations(args, settings)
        if args.command == "normalize":
            return _cmd_normalize(args, settings)
        if args.command == "serve":
            return _cmd_serve(args)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (InvalidWorkflowFile, CatalogError) as e:
        logger.warning(str(e), extra={"command": args.command})
        print(str(e), file=sys.stderr)
        return 2

    except OSError as e:
        logger.warning("Cannot access file", extra={"command": args.command, "error": str(e)})
        print(str(e), file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
