"""
CI pipeline integration for setup-slotalk.
"""

from .workflow import (
    OUTPUT_NAME,
    PathUpdate,
    WorkflowCommandHandler,
    add_path,
    configure_workflow_logging,
    get_input,
    group,
    run_action,
    set_failed,
    set_output,
)

__all__ = [
    "OUTPUT_NAME",
    "PathUpdate",
    "WorkflowCommandHandler",
    "add_path",
    "configure_workflow_logging",
    "get_input",
    "group",
    "run_action",
    "set_failed",
    "set_output",
]
