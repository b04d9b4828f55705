"""Hand an ExecutionPlan to the system ssh binary."""

from __future__ import annotations

import logging

from .logging_utils import log_event
from .plan_builder import ExecutionPlan
from .ssh_keys import StatusRunner, run_status


def run_plan(plan: ExecutionPlan, *, run: StatusRunner = run_status) -> int:
    """Run ssh for plan and return its exit code. Blocks until ssh exits."""
    exit_code = run(plan.ssh_argv())
    log_event(
        "ssh_exit",
        level=logging.INFO if exit_code == 0 else logging.WARNING,
        command=plan.command_name,
        target=plan.target,
        exit_code=exit_code,
    )
    return exit_code
