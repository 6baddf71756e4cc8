"""Recover a JSON value from a model reply that is almost, but not only, JSON.

Models often wrap the object in prose or a code fence. The repair takes
everything from the first ``{`` to the last ``}``.
Braces in the surrounding prose can make that slice unparseable; when several
brace regions exist the outermost span wins.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from app.schemas.resume import AnalysisResult
from app.services.errors import MalformedAnalysis


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _loads(text: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back out.
    return json.loads(text, parse_constant=_reject_constant)


def coerce_json(raw: str) -> Any:
    """Return the parsed JSON value. The value is not checked against any schema."""
    text = raw or ""
    try:
        return _loads(text)
    except (ValueError, RecursionError):
        pass

    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise MalformedAnalysis("no JSON object found", code="no_json_object")

    fragment = text[first : last + 1]
    try:
        return _loads(fragment)
    except (ValueError, RecursionError) as exc:
        raise MalformedAnalysis("unparseable JSON fragment", code="unparseable_json") from exc


def decode_analysis(value: Any, *, strict: bool = True) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedAnalysis("analysis is not a JSON object", code="not_an_object")
    if not strict:
        return value
    try:
        result = AnalysisResult.model_validate(value)
    except ValidationError as exc:
        raise MalformedAnalysis(
            f"analysis does not match the expected schema ({exc.error_count()} errors)",
            code="schema_mismatch",
        ) from exc
    return result.model_dump(by_alias=True)
