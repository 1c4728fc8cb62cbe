"""Web lookup backed by the Wikipedia summary API and DuckDuckGo Instant Answers."""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import requests

from mini_agent.config import settings

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
MAX_RELATED_TOPICS = 3


def _headers() -> dict[str, str]:
    return {"User-Agent": settings.search_user_agent, "Accept": "application/json"}


def query_variations(query: str) -> list[str]:
    """Alternative Wikipedia titles to try after the raw query, deduplicated."""
    candidates = [
        re.sub(r"\s+", "_", query),
        "_".join(query.split(" ")[:2]),
        re.sub(r"[^\w\s]", "", query).strip(),
    ]
    variations: list[str] = []
    for candidate in candidates:
        if candidate and candidate != query and candidate not in variations:
            variations.append(candidate)
    return variations


def _wikipedia_summary(title: str) -> str | None:
    url = WIKIPEDIA_SUMMARY_URL.format(title=quote(title, safe=""))
    resp = requests.get(url, headers=_headers(), timeout=settings.search_timeout)
    if not resp.ok:
        logger.debug("Wikipedia returned %d for %r", resp.status_code, title)
        return None
    return resp.json().get("extract") or None


def _duckduckgo_answer(query: str) -> str | None:
    resp = requests.get(
        DUCKDUCKGO_URL,
        params={"q": query, "format": "json", "no_html": 1, "skip_disambig": 1},
        headers=_headers(),
        timeout=settings.search_timeout,
    )
    if not resp.ok:
        logger.debug("DuckDuckGo returned %d for %r", resp.status_code, query)
        return None
    data = resp.json()

    result = f'Search results for "{query}":\n\n'
    if data.get("Abstract"):
        result += f"Summary: {data['Abstract']}\n\n"
    if data.get("Answer"):
        result += f"Direct Answer: {data['Answer']}\n\n"
    if data.get("Definition"):
        result += f"Definition: {data['Definition']}\n\n"

    topics = data.get("RelatedTopics") or []
    if topics:
        result += "Related Topics:\n"
        for index, topic in enumerate(topics[:MAX_RELATED_TOPICS]):
            if isinstance(topic, dict) and topic.get("Text"):
                result += f"{index + 1}. {topic['Text']}\n"
        result += "\n"

    if data.get("Abstract") or data.get("Answer") or data.get("Definition"):
        return result
    return None


def _format_summary(query: str, extract: str) -> str:
    return f'Search results for "{query}":\n\n📖 **Summary**: {extract}\n\n🔗 **Source**: Wikipedia'


def search(query: str) -> str:
    """Look ``query`` up and return a formatted text block. Never raises."""
    try:
        extract = _wikipedia_summary(query)
        if extract:
            return _format_summary(query, extract)

        for variation in query_variations(query):
            extract = _wikipedia_summary(variation)
            if extract:
                return _format_summary(query, extract)

        answer = _duckduckgo_answer(query)
        if answer:
            return answer

        return (
            f'Search results for "{query}":\n\n'
            "❌ No specific information found. Try:\n"
            "• Rephrasing your search\n"
            "• Being more specific\n"
            "• Using different keywords\n\n"
            "💡 **Tip**: For current events, try searching for specific news sources."
        )
    except Exception as e:
        logger.warning("Search failed for %r: %s", query, e)
        return (
            f'Search results for "{query}":\n\n'
            f'❌ Sorry, I couldn\'t search for "{query}" at the moment. Please try again later.\n\n'
            f"Error: {e}"
        )
