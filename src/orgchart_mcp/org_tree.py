"""
OrgTree — reparenting and move history for an organization hierarchy.

The tree keeps the caller's ``Employee`` structure as its public shape and
maintains two flat maps beside it:

  - ``_nodes``     id -> Employee, for O(1) lookup
  - ``_parent_of`` id -> supervisor id (``None`` for the root)

Every mutation updates a subordinate list and the parent map together, so
both views always describe the same tree.  All traversals use an explicit
stack; arbitrarily deep hierarchies never grow the call stack.

History
-------
Each committed move pushes a ``MoveRecord`` holding the employee, the
supervisor it left (and its position there) and the supervisor it joined.
Undo moves the employee back to the recorded original supervisor; redo
re-applies the move to the recorded new one.  A fresh move clears the redo
stack.  Both stacks are bounded by ``history_limit``; the oldest entries are
discarded first.

Every operation validates before it mutates, so a failed call leaves the
tree and both stacks untouched.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator, Optional

from .errors import (
    EmployeeNotFound,
    InvalidHierarchy,
    InvalidReference,
    NoHistory,
    RootHasNoParent,
)
from .models import Employee, MoveRecord

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


class OrgTree:
    """An org chart supporting ``move`` with ``undo`` and ``redo``.

    Not thread-safe: a tree shared between actors needs one lock held for
    the whole of each call.
    """

    def __init__(self, ceo: Employee, history_limit: int = DEFAULT_HISTORY_LIMIT):
        if history_limit < 1:
            raise InvalidHierarchy(f"history_limit must be at least 1, got {history_limit}")

        self._ceo = ceo
        self._nodes: dict[int, Employee] = {}
        self._parent_of: dict[int, Optional[int]] = {}
        self._undo_stack: deque[MoveRecord] = deque(maxlen=history_limit)
        self._redo_stack: deque[MoveRecord] = deque(maxlen=history_limit)
        self.history_limit = history_limit

        self._index(ceo)
        logger.debug(f"Indexed org tree rooted at {ceo.id} ({len(self._nodes)} employees)")

    def _index(self, ceo: Employee) -> None:
        """Build the lookup maps, rejecting repeated ids."""
        stack: list[tuple[Employee, Optional[int]]] = [(ceo, None)]
        while stack:
            node, parent_id = stack.pop()
            if node.id in self._nodes:
                raise InvalidHierarchy(f"Employee id {node.id} appears more than once")
            self._nodes[node.id] = node
            self._parent_of[node.id] = parent_id
            for sub in reversed(node.subordinates):
                stack.append((sub, node.id))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def ceo(self) -> Employee:
        """The root employee; read the current shape of the tree through it."""
        return self._ceo

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._nodes

    def walk(self) -> Iterator[Employee]:
        """Yield every employee, depth-first, subordinates in stored order."""
        stack = [self._ceo]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.subordinates))

    def locate(self, employee_id: int) -> Optional[Employee]:
        """Return the employee with ``employee_id``, or ``None`` if absent."""
        return self._nodes.get(employee_id)

    def locate_parent(self, employee_id: int) -> Employee:
        """Return the direct supervisor of ``employee_id``.

        Raises:
            RootHasNoParent: ``employee_id`` is the root.
            EmployeeNotFound: no such employee.
        """
        if employee_id not in self._nodes:
            raise EmployeeNotFound(employee_id)
        parent_id = self._parent_of[employee_id]
        if parent_id is None:
            raise RootHasNoParent(employee_id)
        return self._nodes[parent_id]

    def _require(self, employee_id: int) -> Employee:
        node = self._nodes.get(employee_id)
        if node is None:
            raise EmployeeNotFound(employee_id)
        return node

    def subordinate_ids(self, employee_id: int) -> list[int]:
        """Ids of the direct reports of ``employee_id``, in order."""
        return [sub.id for sub in self._require(employee_id).subordinates]

    def descendant_ids(self, employee_id: int) -> set[int]:
        """Ids of everyone below ``employee_id`` (excluding itself)."""
        result = set()
        stack = list(self._require(employee_id).subordinates)
        while stack:
            node = stack.pop()
            result.add(node.id)
            stack.extend(node.subordinates)
        return result

    def chain_of_command(self, employee_id: int) -> list[int]:
        """Supervisor ids from the direct supervisor up to the root."""
        self._require(employee_id)
        chain = []
        current = self._parent_of[employee_id]
        while current is not None:
            chain.append(current)
            current = self._parent_of[current]
        return chain

    def parent_map(self) -> dict[int, Optional[int]]:
        """Snapshot of ``{employee_id: supervisor_id}``; the root maps to ``None``."""
        return dict(self._parent_of)

    # ------------------------------------------------------------------
    # History access
    # ------------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_history(self) -> tuple[MoveRecord, ...]:
        """Undoable moves, oldest first."""
        return tuple(self._undo_stack)

    @property
    def redo_history(self) -> tuple[MoveRecord, ...]:
        """Redoable moves, oldest first (the last one is redone next)."""
        return tuple(self._redo_stack)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def move(self, employee_id: int, supervisor_id: int) -> None:
        """Move ``employee_id`` and its whole subtree under ``supervisor_id``.

        Moving an employee to its current supervisor is allowed: it moves to
        the end of the subordinate list and is recorded like any other move.

        Raises:
            InvalidReference: either id is unknown, the employee is the
                root, or the supervisor is the employee or one of its
                descendants.
        """
        try:
            employee, current, supervisor = self._check_move(employee_id, supervisor_id)
        except InvalidReference as e:
            logger.warning(f"Rejected move {employee_id} -> {supervisor_id}: {e}")
            raise

        position = self._reparent(employee, current, supervisor)
        self._undo_stack.append(MoveRecord(
            employee_id=employee_id,
            from_supervisor_id=current.id,
            to_supervisor_id=supervisor_id,
            from_position=position,
        ))
        self._redo_stack.clear()
        logger.info(f"Moved {employee_id} from {current.id} to {supervisor_id}")

    def undo(self) -> None:
        """Revert the most recent move.

        Raises:
            NoHistory: nothing to undo.
        """
        if not self._undo_stack:
            raise NoHistory("undo")

        record = self._undo_stack[-1]
        employee, current, original = self._check_move(
            record.employee_id, record.from_supervisor_id,
        )
        self._reparent(employee, current, original, position=record.from_position)
        self._undo_stack.pop()
        self._redo_stack.append(record)
        logger.info(
            f"Undid move of {record.employee_id}; back under {record.from_supervisor_id}"
        )

    def redo(self) -> None:
        """Re-apply the most recently undone move.

        Raises:
            NoHistory: nothing to redo.
        """
        if not self._redo_stack:
            raise NoHistory("redo")

        record = self._redo_stack[-1]
        employee, current, supervisor = self._check_move(
            record.employee_id, record.to_supervisor_id,
        )
        self._reparent(employee, current, supervisor)
        self._redo_stack.pop()
        self._undo_stack.append(record)
        logger.info(
            f"Redid move of {record.employee_id}; now under {record.to_supervisor_id}"
        )

    def _check_move(self, employee_id: int,
                    supervisor_id: int) -> tuple[Employee, Employee, Employee]:
        """Validate a move and return (employee, current supervisor, new supervisor)."""
        employee = self._nodes.get(employee_id)
        if employee is None:
            raise InvalidReference(
                f"Unknown employee id {employee_id}", employee_id, supervisor_id,
            )
        supervisor = self._nodes.get(supervisor_id)
        if supervisor is None:
            raise InvalidReference(
                f"Unknown supervisor id {supervisor_id}", employee_id, supervisor_id,
            )

        current_id = self._parent_of[employee_id]
        if current_id is None:
            raise InvalidReference(
                f"Employee {employee_id} is the root and cannot be moved",
                employee_id, supervisor_id,
            )
        if supervisor_id == employee_id:
            raise InvalidReference(
                f"Employee {employee_id} cannot supervise itself",
                employee_id, supervisor_id,
            )
        if self._is_below(supervisor_id, employee_id):
            raise InvalidReference(
                f"Supervisor {supervisor_id} reports to employee {employee_id}; "
                f"the move would create a cycle",
                employee_id, supervisor_id,
            )

        return employee, self._nodes[current_id], supervisor

    def _is_below(self, node_id: int, ancestor_id: int) -> bool:
        """True if ``ancestor_id`` is on the path from ``node_id`` to the root."""
        current = self._parent_of[node_id]
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._parent_of[current]
        return False

    def _reparent(self, employee: Employee, current: Employee, target: Employee,
                  position: Optional[int] = None) -> int:
        """Detach ``employee`` from ``current`` and attach it to ``target``.

        Appends unless ``position`` is given (clamped to the list length).
        Returns the index ``employee`` held under ``current``.
        """
        index = next(
            i for i, sub in enumerate(current.subordinates) if sub.id == employee.id
        )
        del current.subordinates[index]

        if position is None or position >= len(target.subordinates):
            target.subordinates.append(employee)
        else:
            target.subordinates.insert(position, employee)
        self._parent_of[employee.id] = target.id
        return index
