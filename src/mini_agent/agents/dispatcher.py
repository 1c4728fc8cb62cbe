"""Maps a parsed action onto a tool call or loop termination."""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple

from mini_agent.models.agent_schemas import Action, ActionKind
from mini_agent.tools import ToolRegistry

logger = logging.getLogger(__name__)

NO_ACTION_OBSERVATION = "No action taken"

_TOOL_ACTIONS = {
    ActionKind.SEARCH: "search",
    ActionKind.CALCULATE: "calculate",
}


class Dispatch(NamedTuple):
    observation: str
    terminal: bool
    tool_called: bool = False


class ToolDispatcher:
    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def dispatch(self, action: Action) -> Dispatch:
        if action.is_malformed:
            return Dispatch(action.error or "", terminal=False)

        if action.kind is ActionKind.FINAL_ANSWER:
            return Dispatch(action.argument or "", terminal=True)

        if action.kind is ActionKind.NONE:
            # Policy: an unusable reply ends the run instead of asking again.
            return Dispatch(NO_ACTION_OBSERVATION, terminal=True)

        tool_name = _TOOL_ACTIONS[action.kind]
        logger.debug("Dispatching %s(%r)", tool_name, action.argument)
        observation = await asyncio.to_thread(self.registry.execute, tool_name, action.argument or "")
        return Dispatch(observation, terminal=False, tool_called=True)
