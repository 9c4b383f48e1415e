"""Utility to decode JSON objects stored as text, e.g. AI-generated summaries."""

from __future__ import annotations

import json


def extract_json_object(text: str) -> dict:
    """Decode a JSON object from ``text``, tolerating ```json fences.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Parse from the first '{' to the last '}'

    Raises:
        ValueError: if no JSON object can be decoded.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected str, got {type(text).__name__}")
    text = text.strip()

    candidates = [text]
    stripped = _strip_code_fences(text)
    if stripped != text:
        candidates.append(stripped)
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ValueError(f"Could not extract a JSON object from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()
