"""Strip Markdown code-fence wrapping from model answers."""

from __future__ import annotations

import re

_FENCE_OPEN = re.compile(r"^```markdown\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


def sanitize_answer(raw: str) -> str:
    """Remove a leading ```markdown fence and trailing ``` fence, then trim.

    Repeats until nothing changes so that ``sanitize_answer`` is idempotent even
    for nested or whitespace-padded fences.
    """

    text = (raw or "").strip()
    while True:
        stripped = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text, count=1), count=1).strip()
        if stripped == text:
            return text
        text = stripped


__all__ = ["sanitize_answer"]
