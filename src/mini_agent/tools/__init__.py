"""Tool plugin system for the ReAct loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class Tool:
    name: str
    description: str
    parameter: str
    execute: Callable[[str], str]


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def register_many(self, tools: list[Tool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Tool:
        return self._tools[name]

    def list_all(self) -> list[Tool]:
        return list(self._tools.values())

    def describe(self) -> str:
        """Render one ``- name(parameter): description`` line per tool."""
        return "\n".join(
            f"- {tool.name}({tool.parameter}): {tool.description}" for tool in self._tools.values()
        )

    def execute(self, name: str, argument: str) -> str:
        try:
            tool = self._tools[name]
        except KeyError:
            return f"Error: unknown tool '{name}'"
        try:
            return tool.execute(argument)
        except Exception as e:
            logger.error("Tool '%s' failed: %s", name, e)
            return f"Error executing '{name}': {e}"


def create_default_tools() -> list[Tool]:
    from mini_agent.tools.calculator import calculate
    from mini_agent.tools.search import search

    return [
        Tool(
            name="search",
            description="Searches the web for a given query and returns a short summary.",
            parameter="query",
            execute=search,
        ),
        Tool(
            name="calculate",
            description="Evaluates a math expression built from numbers and + - * / ( ).",
            parameter="expression",
            execute=calculate,
        ),
    ]
