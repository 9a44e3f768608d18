"""YAML org chart parser for Org-Chart MCP.

Supports two layouts:
1. Wrapped: a top-level ``ceo:`` mapping
2. Bare: the root employee mapping itself

Example:
    ceo:
      id: 1
      name: Mark Zuckerberg
      subordinates:
        - id: 2
          name: Sarah Donald
          subordinates:
            - id: 3
              name: Cassandra Reynolds
        - id: 4
          name: Tyler Simpson
"""

from __future__ import annotations
from pathlib import Path

import yaml

from .models import Employee


def parse_yaml(yaml_str: str) -> Employee:
    """Parse a YAML string into an Employee tree."""
    data = yaml.safe_load(yaml_str)
    if not data:
        raise ValueError("Empty YAML input")
    if not isinstance(data, dict):
        raise ValueError("YAML org chart must be a mapping")

    if "ceo" in data:
        return employee_from_dict(data["ceo"])
    return employee_from_dict(data)


def parse_file(path: str) -> Employee:
    """Parse a YAML file into an Employee tree."""
    content = Path(path).read_text()
    return parse_yaml(content)


def employee_from_dict(data: dict) -> Employee:
    """Build an Employee tree from nested dicts.

    Walks the input with an explicit stack, so deep hierarchies are fine.
    Errors name the offending node by its path, e.g. ``ceo.subordinates[1]``.
    """
    root = _parse_employee(data, "ceo")
    # YAML anchors can make a mapping reappear, even inside itself
    seen = {id(data)}
    stack = [(root, data, "ceo")]
    while stack:
        employee, raw, path = stack.pop()
        subs = raw.get("subordinates") or []
        if not isinstance(subs, list):
            raise ValueError(f"{path}.subordinates must be a list")
        for i, sub_data in enumerate(subs):
            sub_path = f"{path}.subordinates[{i}]"
            sub = _parse_employee(sub_data, sub_path)
            if id(sub_data) in seen:
                raise ValueError(f"{sub_path} repeats an earlier entry")
            seen.add(id(sub_data))
            employee.subordinates.append(sub)
            stack.append((sub, sub_data, sub_path))
    return root


def _parse_employee(data: object, path: str) -> Employee:
    """Parse a single employee (without subordinates) from YAML data."""
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a mapping")
    if "id" not in data:
        raise ValueError(f"{path} is missing 'id'")

    employee_id = data["id"]
    if isinstance(employee_id, bool) or not isinstance(employee_id, int):
        raise ValueError(f"{path}.id must be an integer, got {employee_id!r}")

    return Employee(id=employee_id, name=str(data.get("name") or ""))


def employee_to_dict(employee: Employee) -> dict:
    """Serialize an Employee tree to nested dicts (inverse of ``employee_from_dict``)."""
    root_data = {"id": employee.id, "name": employee.name}
    stack = [(employee, root_data)]
    while stack:
        node, node_data = stack.pop()
        if not node.subordinates:
            continue
        node_data["subordinates"] = []
        for sub in node.subordinates:
            sub_data = {"id": sub.id, "name": sub.name}
            node_data["subordinates"].append(sub_data)
            stack.append((sub, sub_data))
    return root_data


def org_to_yaml(ceo: Employee) -> str:
    """Serialize an Employee tree back to YAML."""
    data = {"ceo": employee_to_dict(ceo)}
    return yaml.dump(data, default_flow_style=False, sort_keys=False)
