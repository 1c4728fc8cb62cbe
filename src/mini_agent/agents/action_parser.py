"""Tolerant parser for the ACTION/QUERY/EXPRESSION/ANSWER reply format.

The model is asked to answer with lines such as::

    ACTION: calculate
    EXPRESSION: 25 * 4

Anything around those lines is ignored and the first ``ACTION:`` line wins.
Unparseable replies map to the ``none`` action; a recognised action missing
its field comes back with ``Action.error`` set instead of raising.
"""

from __future__ import annotations

import logging
import re

from mini_agent.models.agent_schemas import Action, ActionKind

logger = logging.getLogger(__name__)

_ACTION_RE = re.compile(r"^[ \t*#>-]*ACTION[ \t]*:[ \t*]*([A-Za-z_]+)", re.IGNORECASE | re.MULTILINE)

MISSING_QUERY = "Error: No search query specified"
MISSING_EXPRESSION = "Error: No expression specified"
MISSING_ANSWER = "Error: No final answer specified"

_FIELDS: dict[ActionKind, tuple[str, str]] = {
    ActionKind.SEARCH: ("QUERY", MISSING_QUERY),
    ActionKind.CALCULATE: ("EXPRESSION", MISSING_EXPRESSION),
    ActionKind.FINAL_ANSWER: ("ANSWER", MISSING_ANSWER),
}


def _field_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"^[ \t*#>-]*{name}[ \t]*:(.*)$", re.IGNORECASE | re.MULTILINE)


_FIELD_RES = {kind: _field_pattern(name) for kind, (name, _) in _FIELDS.items()}

# Next non-blank line, for replies that put the value under its key.
_NEXT_LINE_RE = re.compile(r"\n(?:[ \t]*\n)*[ \t]*(\S[^\n]*)")
_KEY_LINE_RE = re.compile(r"^[ \t*#>-]*(?:ACTION|QUERY|EXPRESSION|ANSWER)[ \t]*:", re.IGNORECASE)


def _clean(value: str) -> str:
    return value.strip().strip("*").strip()


def _extract_field(kind: ActionKind, text: str, start: int) -> str | None:
    match = _FIELD_RES[kind].search(text, start)
    if match is None:
        return None
    value = _clean(match.group(1))
    if not value:
        following = _NEXT_LINE_RE.match(text, match.end())
        if following and not _KEY_LINE_RE.match(following.group(1)):
            value = _clean(following.group(1))
    return value or None


def parse_action(text: str | None) -> Action:
    """Extract the first action from a model reply. Never raises."""
    if text is None:
        text = ""
    elif not isinstance(text, str):
        text = str(text)

    match = _ACTION_RE.search(text)
    if match is None:
        logger.debug("No ACTION line in model reply")
        return Action.none()

    keyword = match.group(1).lower()
    try:
        kind = ActionKind(keyword)
    except ValueError:
        logger.debug("Unrecognised action keyword %r", keyword)
        return Action.none()

    if kind is ActionKind.NONE:
        return Action.none()

    value = _extract_field(kind, text, match.end())
    if value is None:
        _, error = _FIELDS[kind]
        logger.debug("Action %s is missing its field", kind.value)
        return Action(kind=kind, error=error)
    return Action(kind=kind, argument=value)
