"""Link convergence engine.

This module provides current-state probing, convergence planning and
the symbolic/hard link strategies used to create and delete links
idempotently.
"""

from linkctl.links.engine import converge, create, delete, probe
from linkctl.links.errors import ErrorKind, LinkError, classify_os_error
from linkctl.links.models import (
    CurrentState,
    EntryKind,
    LinkAction,
    LinkDescriptor,
    LinkKind,
    LinkOutcome,
    OutcomeStatus,
)
from linkctl.links.planner import Plan, PlanStep, plan_create, plan_delete

__all__ = [
    "CurrentState",
    "EntryKind",
    "ErrorKind",
    "LinkAction",
    "LinkDescriptor",
    "LinkError",
    "LinkKind",
    "LinkOutcome",
    "OutcomeStatus",
    "Plan",
    "PlanStep",
    "classify_os_error",
    "converge",
    "create",
    "delete",
    "plan_create",
    "plan_delete",
    "probe",
]
