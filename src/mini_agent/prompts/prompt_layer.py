"""Reasoning, action and final-answer templates, read from templates/*.txt."""

from __future__ import annotations

from pathlib import Path

TEMPLATES_DIR = Path(__file__).parent / "templates"

_cache: dict[str, str] = {}


def load_prompt(name: str) -> str:
    """Return the raw template ``name`` (no extension), cached after first read."""
    if name not in _cache:
        _cache[name] = (TEMPLATES_DIR / f"{name}.txt").read_text(encoding="utf-8").strip()
    return _cache[name]


def render_prompt(name: str, **values: str) -> str:
    return load_prompt(name).format(**values)
