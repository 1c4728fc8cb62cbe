"""Renders the reasoning, action-selection and final-synthesis prompts."""

from __future__ import annotations

from typing import Sequence

from mini_agent.models.agent_schemas import Step
from mini_agent.prompts.prompt_layer import render_prompt

TOOL_DESCRIPTIONS = (
    "- search(query): Searches the web for a given query and returns a short summary.\n"
    "- calculate(expression): Evaluates a math expression built from numbers and + - * / ( )."
)

NO_STEPS = "(none yet)"


def format_step(step: Step) -> str:
    lines = [
        f"Step {step.number}:",
        f"Thought: {step.thought}",
        f"Action: {step.action.value}",
    ]
    if step.action_input is not None:
        lines.append(f"Action input: {step.action_input}")
    lines.append(f"Observation: {step.observation}")
    return "\n".join(lines)


def format_history(history: Sequence[Step]) -> str:
    if not history:
        return NO_STEPS
    return "\n\n".join(format_step(step) for step in history)


def reasoning_prompt(user_request: str, history: Sequence[Step], tools: str = TOOL_DESCRIPTIONS) -> str:
    return render_prompt(
        "reasoning",
        user_request=user_request,
        tools=tools,
        history=format_history(history),
    )


def action_prompt(thought: str) -> str:
    return render_prompt("action", thought=thought)


def final_prompt(user_request: str, history: Sequence[Step]) -> str:
    return render_prompt(
        "final",
        user_request=user_request,
        history=format_history(history),
    )
