"""Models for the ReAct loop."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from mini_agent.config import Settings


class ActionKind(str, Enum):
    SEARCH = "search"
    CALCULATE = "calculate"
    FINAL_ANSWER = "final_answer"
    NONE = "none"


class RunState(str, Enum):
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class Action(BaseModel):
    """A decision extracted from model text.

    ``argument`` holds the query, expression or answer depending on ``kind``.
    ``error`` is set when the model named an action but left out its
    required field; such an action is never executed.
    """

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    argument: str | None = None
    error: str | None = None

    @classmethod
    def search(cls, query: str) -> Action:
        return cls(kind=ActionKind.SEARCH, argument=query)

    @classmethod
    def calculate(cls, expression: str) -> Action:
        return cls(kind=ActionKind.CALCULATE, argument=expression)

    @classmethod
    def final_answer(cls, answer: str) -> Action:
        return cls(kind=ActionKind.FINAL_ANSWER, argument=answer)

    @classmethod
    def none(cls) -> Action:
        return cls(kind=ActionKind.NONE)

    @property
    def is_malformed(self) -> bool:
        return self.error is not None


class Step(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    thought: str
    action: ActionKind
    action_input: str | None = None
    observation: str


class RunConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_steps: int = Field(default=3, gt=0)
    min_call_interval: float = Field(default=2.0, ge=0)
    overload_retry_delay: float = Field(default=30.0, ge=0)

    @classmethod
    def from_settings(cls, settings: Settings, max_steps: int = 0) -> RunConfig:
        return cls(
            max_steps=max_steps or settings.max_steps,
            min_call_interval=settings.min_call_interval,
            overload_retry_delay=settings.overload_retry_delay,
        )


class AgentResult(BaseModel):
    output: str
    state: RunState
    steps: list[Step] = []
    llm_calls: int = 0
    tool_calls: int = 0
    error: str | None = None
