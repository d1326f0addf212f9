"""MCP server: exposes the adoption queue to LLM clients via stdio transport."""

from __future__ import annotations

import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from shelterqueue.config import Config
from shelterqueue.session import ShelterSession


def _make_server(config: Config) -> tuple[Server, ShelterSession]:
    # Queue state lives for as long as the server process does.
    session = ShelterSession(categories=config.categories)
    server = Server("shelterqueue")

    category_schema = {
        "type": "string",
        "enum": config.categories,
        "description": "Animal category",
    }

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(
                name="admit_animal",
                description=(
                    "Admit an animal to the shelter. Its arrival time is the "
                    "moment of admission."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Animal name"},
                        "category": category_schema,
                    },
                    "required": ["name", "category"],
                },
            ),
            Tool(
                name="adopt_oldest",
                description=(
                    "Adopt the animal that has waited longest, regardless of "
                    "category. Returns null when the shelter is empty."
                ),
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="adopt_oldest_by_category",
                description=(
                    "Adopt the longest-waiting animal of one category. "
                    "Returns null when none of that category is waiting."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {"category": category_schema},
                    "required": ["category"],
                },
            ),
            Tool(
                name="peek_oldest",
                description="Show the next animal up for adoption without adopting it.",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="list_animals",
                description="List every waiting animal in adoption order.",
                inputSchema={"type": "object", "properties": {}},
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        try:
            result = _dispatch(name, arguments or {}, session)
            return [TextContent(type="text", text=json.dumps(result, indent=2))]
        except Exception as exc:
            return [TextContent(type="text", text=json.dumps({"error": str(exc)}))]

    return server, session


def _dispatch(name: str, args: dict[str, Any], session: ShelterSession) -> Any:
    if name == "admit_animal":
        return session.admit(args["category"], args["name"]).to_dict()

    elif name == "adopt_oldest":
        return session.adopt().to_dict()

    elif name == "adopt_oldest_by_category":
        return session.adopt(args["category"]).to_dict()

    elif name == "peek_oldest":
        return session.peek().to_dict()

    elif name == "list_animals":
        return session.list_animals().to_dict()

    else:
        raise ValueError(f"Unknown tool: {name}")


async def run_server(config: Config | None = None) -> None:
    if config is None:
        config = Config.load_from_cwd()

    server, _session = _make_server(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
