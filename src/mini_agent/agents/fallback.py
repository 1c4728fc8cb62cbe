"""Best-effort answer assembled from completed steps when a run fails."""

from __future__ import annotations

from typing import Sequence

from mini_agent.models.agent_schemas import ActionKind, Step

NO_INFORMATION = "I was unable to gather any information to answer your request."
NO_VERIFIED_RESULTS = (
    "I ran into a problem before I could finish answering your request, "
    "and none of the completed steps produced a verified result to share."
)
PARTIAL_HEADER = "I ran into a problem before I could finish answering your request. Here is what I was able to work out:"


def synthesize_fallback(history: Sequence[Step]) -> str:
    """Summarise calculation results only; other observations need the model to verify."""
    if not history:
        return NO_INFORMATION

    results = [
        step.observation
        for step in history
        if step.action is ActionKind.CALCULATE and not step.observation.startswith("Error")
    ]
    if not results:
        return NO_VERIFIED_RESULTS

    lines = [PARTIAL_HEADER, ""]
    lines.extend(f"- {result}" for result in results)
    return "\n".join(lines)
