"""Tests for the ACTION/QUERY/EXPRESSION/ANSWER reply parser."""

from __future__ import annotations

import pytest

from mini_agent.agents.action_parser import (
    MISSING_ANSWER,
    MISSING_EXPRESSION,
    MISSING_QUERY,
    parse_action,
)
from mini_agent.models.agent_schemas import Action, ActionKind


def test_calculate_with_expression():
    assert parse_action("ACTION: calculate\nEXPRESSION: 2+2") == Action.calculate("2+2")


def test_search_with_query():
    action = parse_action("ACTION: search\nQUERY: Albert Einstein")
    assert action == Action.search("Albert Einstein")


def test_final_answer():
    action = parse_action("ACTION: final_answer\nANSWER: Einstein was a physicist; 25 * 4 = 100.")
    assert action.kind is ActionKind.FINAL_ANSWER
    assert action.argument == "Einstein was a physicist; 25 * 4 = 100."


def test_explicit_none():
    assert parse_action("ACTION: none") == Action.none()


def test_search_without_query_is_malformed():
    action = parse_action("ACTION: search")
    assert action.kind is ActionKind.SEARCH
    assert action.argument is None
    assert action.error == MISSING_QUERY == "Error: No search query specified"


def test_calculate_without_expression_is_malformed():
    action = parse_action("ACTION: calculate\nQUERY: 2+2")
    assert action.error == MISSING_EXPRESSION
    assert action.argument is None


def test_final_answer_without_answer_is_malformed():
    action = parse_action("ACTION: final_answer")
    assert action.kind is ActionKind.FINAL_ANSWER
    assert action.error == MISSING_ANSWER


def test_empty_field_value_counts_as_missing():
    assert parse_action("ACTION: search\nQUERY:   ").error == MISSING_QUERY


def test_value_on_the_line_below_its_key():
    assert parse_action("ACTION: search\nQUERY:\nAlbert Einstein") == Action.search("Albert Einstein")
    action = parse_action("ACTION: final_answer\nANSWER:\n\n  Paris is the capital; 15 * 8 = 120.\n")
    assert action == Action.final_answer("Paris is the capital; 15 * 8 = 120.")


def test_next_key_line_is_not_taken_as_value():
    action = parse_action("ACTION: search\nQUERY:\nACTION: calculate")
    assert action.error == MISSING_QUERY


@pytest.mark.parametrize("text", ["", "   ", "I think we should search.", "ACTION search", None, 42])
def test_unparseable_input_yields_none(text):
    assert parse_action(text) == Action.none()


def test_unknown_keyword_yields_none():
    assert parse_action("ACTION: browse\nQUERY: x") == Action.none()


def test_case_insensitive_keywords():
    action = parse_action("action: CALCULATE\nexpression: 100 / 4")
    assert action == Action.calculate("100 / 4")


def test_surrounding_text_is_ignored():
    text = (
        "Sure, here is my choice.\n"
        "\n"
        "ACTION: search\n"
        "QUERY: quantum physics\n"
        "\n"
        "Let me know the result."
    )
    assert parse_action(text) == Action.search("quantum physics")


def test_first_action_wins():
    text = "ACTION: calculate\nEXPRESSION: 15 * 8\nACTION: search\nQUERY: Paris"
    assert parse_action(text) == Action.calculate("15 * 8")


def test_field_must_follow_action_line():
    text = "QUERY: too early\nACTION: search\nQUERY: capital of France"
    assert parse_action(text) == Action.search("capital of France")


def test_markdown_decoration_is_tolerated():
    text = "**ACTION:** calculate\n**EXPRESSION:** 25 * 4"
    assert parse_action(text) == Action.calculate("25 * 4")


def test_action_inside_a_sentence_is_not_matched():
    assert parse_action("The next ACTION: search would help").kind is ActionKind.NONE
