"""Error taxonomy for Org-Chart MCP."""

from __future__ import annotations

from typing import Optional


class OrgChartError(Exception):
    """Base class for every org chart failure."""


class InvalidReference(OrgChartError):
    """A move named an unknown employee or would break the tree.

    ``employee_id`` and ``supervisor_id`` carry the arguments of the
    rejected call.
    """

    def __init__(self, message: str, employee_id: Optional[int] = None,
                 supervisor_id: Optional[int] = None):
        super().__init__(message)
        self.employee_id = employee_id
        self.supervisor_id = supervisor_id


class NoHistory(OrgChartError):
    """Undo or redo was requested with an empty stack."""

    def __init__(self, action: str):
        super().__init__(f"No moves to {action}")
        self.action = action


class NotFound(OrgChartError):
    """A supervisor lookup failed.  See the two subclasses."""

    def __init__(self, message: str, employee_id: int):
        super().__init__(message)
        self.employee_id = employee_id


class EmployeeNotFound(NotFound):
    """No employee with the given id exists in the tree."""

    def __init__(self, employee_id: int):
        super().__init__(f"Employee {employee_id} not found", employee_id)


class RootHasNoParent(NotFound):
    """The id belongs to the root, which has no supervisor."""

    def __init__(self, employee_id: int):
        super().__init__(f"Employee {employee_id} is the root and has no supervisor", employee_id)


class InvalidHierarchy(OrgChartError):
    """The supplied tree violates the hierarchy invariants."""
