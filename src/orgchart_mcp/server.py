"""Org-Chart MCP server — MCP tools for reorganizing an org chart with undo/redo."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

import yaml

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .errors import OrgChartError
from .models import MoveRecord
from .org_tree import DEFAULT_HISTORY_LIMIT, OrgTree
from .parser import org_to_yaml, parse_file, parse_yaml

logger = logging.getLogger(__name__)


# --- Constants ---
ORG_FILE = os.environ.get("ORGCHART_FILE")
HISTORY_LIMIT = int(os.environ.get("ORGCHART_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT))
LOG_LEVEL = os.environ.get("ORGCHART_LOG_LEVEL", "INFO")

server = Server("orgchart-mcp")

# The org chart being edited in this session
_org: Optional[OrgTree] = None


def get_org() -> Optional[OrgTree]:
    return _org


def set_org(org: Optional[OrgTree]) -> None:
    global _org
    _org = org


# --- Tool definitions ---

_EMPLOYEE_ID = {"type": "integer", "description": "Unique id of the employee"}


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="load_org",
            description=(
                "Load an org chart from a YAML string, replacing the current one "
                "and clearing the move history."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "yaml_org": {
                        "type": "string",
                        "description": (
                            "YAML string defining the hierarchy. Example:\n"
                            "ceo:\n"
                            "  id: 1\n"
                            "  name: Mark\n"
                            "  subordinates:\n"
                            "    - id: 2\n"
                            "      name: Sarah\n"
                            "\n"
                            "Ids must be unique integers."
                        ),
                    },
                },
                "required": ["yaml_org"],
            },
        ),
        Tool(
            name="show_org",
            description="Return the current org chart as YAML.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="move_employee",
            description=(
                "Move an employee, together with everyone reporting to them, "
                "under a new supervisor. Clears the redo history."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "employee_id": _EMPLOYEE_ID,
                    "supervisor_id": {
                        "type": "integer",
                        "description": "Id of the new supervisor",
                    },
                },
                "required": ["employee_id", "supervisor_id"],
            },
        ),
        Tool(
            name="undo_move",
            description="Undo the most recent move.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="redo_move",
            description="Redo the most recently undone move.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="get_history",
            description="List the moves that can be undone and redone.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="get_supervisor",
            description="Get the direct supervisor of an employee.",
            inputSchema={
                "type": "object",
                "properties": {
                    "employee_id": _EMPLOYEE_ID,
                },
                "required": ["employee_id"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    if name == "load_org":
        return await _load_org(arguments)
    elif name == "show_org":
        return await _show_org(arguments)
    elif name == "move_employee":
        return await _move_employee(arguments)
    elif name == "undo_move":
        return await _undo_move(arguments)
    elif name == "redo_move":
        return await _redo_move(arguments)
    elif name == "get_history":
        return await _get_history(arguments)
    elif name == "get_supervisor":
        return await _get_supervisor(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


def _text(payload: dict) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload))]


def _error(e: Exception) -> list[TextContent]:
    return [TextContent(type="text", text=f"{type(e).__name__}: {e}")]


_NO_ORG = [TextContent(type="text", text="No org chart loaded. Call load_org first.")]


def _record_dict(record: MoveRecord) -> dict:
    return {
        "employee_id": record.employee_id,
        "from_supervisor_id": record.from_supervisor_id,
        "to_supervisor_id": record.to_supervisor_id,
    }


async def _load_org(args: dict) -> list[TextContent]:
    """Parse a YAML org chart and make it the session tree."""
    try:
        ceo = parse_yaml(args["yaml_org"])
        org = OrgTree(ceo, history_limit=HISTORY_LIMIT)
    except (KeyError, ValueError, yaml.YAMLError, OrgChartError) as e:
        logger.warning(f"Failed to load org chart: {e}")
        return _error(e)

    set_org(org)
    logger.info(f"Loaded org chart rooted at {ceo.id} ({len(org)} employees)")
    return _text({
        "status": "success",
        "ceo": ceo.id,
        "employees": len(org),
    })


async def _show_org(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG
    return [TextContent(type="text", text=org_to_yaml(org.ceo))]


async def _move_employee(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG

    try:
        employee_id = int(args["employee_id"])
        supervisor_id = int(args["supervisor_id"])
        org.move(employee_id, supervisor_id)
    except (KeyError, TypeError, ValueError, OrgChartError) as e:
        return _error(e)

    return _text({
        "status": "success",
        "employee_id": employee_id,
        "supervisor_id": supervisor_id,
        "can_undo": org.can_undo,
        "can_redo": org.can_redo,
    })


async def _undo_move(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG

    try:
        org.undo()
    except OrgChartError as e:
        return _error(e)

    record = org.redo_history[-1]
    return _text({
        "status": "success",
        "undone": _record_dict(record),
        "can_undo": org.can_undo,
        "can_redo": org.can_redo,
    })


async def _redo_move(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG

    try:
        org.redo()
    except OrgChartError as e:
        return _error(e)

    record = org.undo_history[-1]
    return _text({
        "status": "success",
        "redone": _record_dict(record),
        "can_undo": org.can_undo,
        "can_redo": org.can_redo,
    })


async def _get_history(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG

    return _text({
        "status": "success",
        "undo": [_record_dict(r) for r in org.undo_history],
        "redo": [_record_dict(r) for r in org.redo_history],
    })


async def _get_supervisor(args: dict) -> list[TextContent]:
    org = get_org()
    if org is None:
        return _NO_ORG

    try:
        employee_id = int(args["employee_id"])
        supervisor = org.locate_parent(employee_id)
    except (KeyError, TypeError, ValueError, OrgChartError) as e:
        return _error(e)

    return _text({
        "status": "success",
        "employee_id": employee_id,
        "supervisor_id": supervisor.id,
        "supervisor_name": supervisor.name,
    })


def main():
    """Entry point for the MCP server."""
    import asyncio

    # stdout carries the protocol; basicConfig logs to stderr
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if ORG_FILE:
        set_org(OrgTree(parse_file(ORG_FILE), history_limit=HISTORY_LIMIT))
        logger.info(f"Loaded org chart from {ORG_FILE}")
    asyncio.run(_run())


async def _run():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    main()
