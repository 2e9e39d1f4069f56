"""Best-effort recovery of a JSON object from noisy model output.

Models wrap JSON in prose, in ```json fences, or both. Extraction:
  1. Reject empty / non-text input
  2. Trim whitespace
  3. Take the interior of the first fenced block, if any
  4. Slice from the first "{" to the last "}"
  5. json.loads() the result; a parse failure propagates unchanged

The first/last brace slice is a heuristic: a stray "}" inside a string
literal, or several sibling objects, will produce an unparseable span.
"""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class JSONExtractionError(ValueError):
    """Raised when the model output holds no text to extract from."""


def extract_json(raw: Any) -> Any:
    """Return the JSON value recovered from ``raw``.

    Raises JSONExtractionError for empty/non-text input and
    json.JSONDecodeError when the recovered span does not parse.
    """
    if not raw or not isinstance(raw, str):
        raise JSONExtractionError("Empty response")

    text = raw.strip()

    fence = _FENCE_RE.search(text)
    if fence and fence.group(1):
        text = fence.group(1).strip()

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1 and last > first:
        text = text[first : last + 1]

    return json.loads(text)
