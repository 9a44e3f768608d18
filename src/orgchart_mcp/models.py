"""
Data models for Org-Chart MCP — the organization hierarchy.

An organization is a rooted tree of employees.  The root is the CEO; every
other employee reports to exactly one supervisor:

    Employee (CEO)
    ├── Employee
    │   └── Employee
    └── Employee

Each employee has an integer ``id`` (unique across the whole tree and never
reassigned), a ``name`` used only for display, and an ordered list of
``subordinates``.  Order is insertion order; it does not affect correctness
but keeps traversal and tests reproducible.

This module also defines ``MoveRecord``, the history entry written for every
committed move.  A record captures both the supervisor the employee left and
the one it joined, so undo never has to re-derive where the employee came
from.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Employee (a node of the hierarchy)
# ---------------------------------------------------------------------------

class Employee(BaseModel):
    """An employee — a single node of the org chart.

    Identity
    --------
    ``id`` is frozen: the tree keys its lookup maps on it.  Assigning to it
    raises ``ValidationError``.

    Subordinates
    ------------
    ``subordinates`` holds the direct reports in insertion order.  The list
    is mutated in place by ``OrgTree``; callers should treat it as
    read-only while a tree owns the node.
    """
    id: int = Field(frozen=True)
    name: str = ""
    subordinates: list[Employee] = Field(default_factory=list)

    def get_label(self) -> str:
        """Get the display label for this employee.

        Returns ``name`` if set, otherwise ``#<id>``.
        """
        return self.name if self.name else f"#{self.id}"


Employee.model_rebuild()


# ---------------------------------------------------------------------------
# MoveRecord (a history entry)
# ---------------------------------------------------------------------------

class MoveRecord(BaseModel):
    """A committed move, kept on the undo and redo stacks.

    Attributes:
        employee_id:        The employee that was moved (with its subtree).
        from_supervisor_id: The supervisor before the move.
        to_supervisor_id:   The supervisor after the move.
        from_position:      Index the employee held among the original
                            supervisor's subordinates.
    """
    model_config = ConfigDict(frozen=True)

    employee_id: int
    from_supervisor_id: int
    to_supervisor_id: int
    from_position: int = 0
