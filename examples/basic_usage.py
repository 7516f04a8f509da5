#!/usr/bin/env python3
"""Programmatic workflow design example.

This demonstrates using the designer store directly:

* build a small onboarding workflow
* inspect validation badges after each edit
* simulate it against the built-in automation catalog
* undo the last edit and export the result

The export destination is passed as an argument.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.graph.models import Position
from workflow_designer.designer.logging import configure_logging
from workflow_designer.designer.store import WorkflowStore, make_node
from workflow_designer.designer.workflow_file import write_workflow_file


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build and simulate a sample workflow.")
    parser.add_argument(
        "--output", type=Path, default=Path("onboarding.json"), help="Export destination"
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = DesignerSettings()
    configure_logging(settings.log_level)

    store = WorkflowStore(settings=settings)

    start = make_node("start", Position(x=0, y=0), node_id="start", title="New hire")
    task = make_node(
        "task", Position(x=200, y=0), node_id="collect-docs", title="Collect documents"
    )
    email = make_node("automated", Position(x=400, y=0), node_id="welcome", title="Welcome email")
    end = make_node("end", Position(x=600, y=0), node_id="done", title="Done")

    for node in (start, task, email, end):
        store.add_node(node)

    store.connect("start", "collect-docs")
    store.connect("collect-docs", "welcome")
    store.connect("welcome", "done")

    store.update_node(
        "welcome", {"actionId": "send_email", "actionParams": {"to": "hr@example.com"}}
    )

    print("Global errors:", store.validation.globalErrors or "none")

    result = store.run_simulation()
    for step in result.steps:
        print(f"  [{step.status.value}] {step.step}")
    print("Valid:", result.valid)

    store.undo()
    welcome = store.get_node("welcome")
    print("After undo, 'welcome' action:", welcome.data.actionId if welcome else None)

    write_workflow_file(args.output, store.nodes, store.edges)
    print(f"Exported to: {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
