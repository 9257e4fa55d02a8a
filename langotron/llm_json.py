"""Helpers for reading JSON objects out of LLM replies."""

from __future__ import annotations

import json
from typing import Any, Optional


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence such as ```json ... ```."""

    stripped = (text or "").strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()
    if len(lines) < 2:
        return stripped.strip("`").strip()
    if lines[-1].strip().startswith("```"):
        return "\n".join(lines[1:-1]).strip()
    return "\n".join(lines[1:]).strip()


def _extract_json_block(text: str) -> Optional[str]:
    start_candidates = [idx for idx in (text.find("{"), text.find("[")) if idx != -1]
    if not start_candidates:
        return None
    start = min(start_candidates)
    end = max(text.rfind("}"), text.rfind("]"))
    if end <= start:
        return None
    return text[start : end + 1].strip()


def parse_json_payload(text: str) -> Optional[Any]:
    """Return a JSON payload parsed from ``text`` when possible."""

    if not text:
        return None
    candidates = [text.strip(), strip_code_fence(text)]
    extracted = _extract_json_block(text)
    if extracted:
        candidates.append(extracted)
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None


__all__ = ["parse_json_payload", "strip_code_fence"]
