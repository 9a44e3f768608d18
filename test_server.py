"""Tests for the Org-Chart MCP tool handlers, called directly without a transport."""

import asyncio
import json

import pytest
import yaml

from orgchart_mcp import server


ORG_YAML = """
ceo:
  id: 1
  name: Mark
  subordinates:
    - id: 2
      name: Sarah
      subordinates:
        - id: 3
          name: Cassandra
    - id: 4
      name: Tyler
"""


def call(name, arguments=None):
    result = asyncio.run(server.call_tool(name, arguments or {}))
    assert len(result) == 1
    return result[0].text


def call_json(name, arguments=None):
    return json.loads(call(name, arguments))


@pytest.fixture(autouse=True)
def fresh_session():
    server.set_org(None)
    yield
    server.set_org(None)


@pytest.fixture
def loaded():
    payload = call_json("load_org", {"yaml_org": ORG_YAML})
    assert payload == {"status": "success", "ceo": 1, "employees": 4}


def test_list_tools():
    tools = asyncio.run(server.list_tools())
    assert {t.name for t in tools} == {
        "load_org", "show_org", "move_employee", "undo_move",
        "redo_move", "get_history", "get_supervisor",
    }


def test_tools_require_loaded_org():
    assert "load_org first" in call("move_employee", {"employee_id": 3, "supervisor_id": 1})
    assert "load_org first" in call("undo_move")
    assert "load_org first" in call("show_org")


def test_load_org_rejects_bad_input():
    assert call("load_org", {"yaml_org": ""}).startswith("ValueError")
    dup = "ceo:\n  id: 1\n  subordinates:\n    - id: 1\n"
    assert call("load_org", {"yaml_org": dup}).startswith("InvalidHierarchy")
    assert server.get_org() is None


def test_move_undo_redo(loaded):
    moved = call_json("move_employee", {"employee_id": 3, "supervisor_id": 1})
    assert moved["status"] == "success"
    assert moved["can_undo"] and not moved["can_redo"]
    assert call_json("get_supervisor", {"employee_id": 3})["supervisor_id"] == 1

    undone = call_json("undo_move")
    assert undone["undone"] == {"employee_id": 3, "from_supervisor_id": 2, "to_supervisor_id": 1}
    assert call_json("get_supervisor", {"employee_id": 3})["supervisor_name"] == "Sarah"

    redone = call_json("redo_move")
    assert redone["redone"]["employee_id"] == 3
    assert call_json("get_supervisor", {"employee_id": 3})["supervisor_id"] == 1


def test_show_org_reflects_moves(loaded):
    call("move_employee", {"employee_id": 4, "supervisor_id": 3})

    shown = yaml.safe_load(call("show_org"))
    sarah = shown["ceo"]["subordinates"][0]
    assert [s["id"] for s in shown["ceo"]["subordinates"]] == [2]
    assert sarah["subordinates"][0]["subordinates"] == [{"id": 4, "name": "Tyler"}]


def test_history(loaded):
    call("move_employee", {"employee_id": 3, "supervisor_id": 4})
    call("move_employee", {"employee_id": 2, "supervisor_id": 4})
    call("undo_move")

    history = call_json("get_history")
    assert [r["employee_id"] for r in history["undo"]] == [3]
    assert [r["employee_id"] for r in history["redo"]] == [2]


def test_errors_are_reported_as_text(loaded):
    assert call("move_employee", {"employee_id": 9999, "supervisor_id": 1}).startswith("InvalidReference")
    assert call("move_employee", {"employee_id": 2, "supervisor_id": 3}).startswith("InvalidReference")
    assert call("undo_move").startswith("NoHistory")
    assert call("redo_move").startswith("NoHistory")
    assert call("get_supervisor", {"employee_id": 1}).startswith("RootHasNoParent")
    assert call("get_supervisor", {"employee_id": 42}).startswith("EmployeeNotFound")


def test_unknown_tool():
    assert call("rename_employee") == "Unknown tool: rename_employee"


def test_malformed_yaml_is_reported_as_text():
    reply = call("load_org", {"yaml_org": "ceo: [\n"})
    assert reply.startswith("ParserError")
    assert server.get_org() is None


def test_bad_arguments_are_reported_as_text(loaded):
    assert call("move_employee", {"employee_id": "x", "supervisor_id": 1}).startswith("ValueError")
    assert call("move_employee", {"employee_id": 2}).startswith("KeyError")
    assert call("move_employee", {"employee_id": None, "supervisor_id": 1}).startswith("TypeError")
    assert call("get_supervisor", {}).startswith("KeyError")
    assert call("get_supervisor", {"employee_id": "boss"}).startswith("ValueError")
    assert call_json("get_history") == {"status": "success", "undo": [], "redo": []}
