"""
Action command implementation.

Runs the CI pipeline step with workflow command logging.
"""

from setup_slotalk.actions.workflow import configure_workflow_logging, run_action


def run(args) -> int:
    configure_workflow_logging()
    return run_action()
