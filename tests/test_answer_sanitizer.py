import pytest

from services.answer_sanitizer import sanitize_answer


def test_strips_markdown_fence():
    assert sanitize_answer("```markdown\nLast PO: 2025-01-01\n```") == "Last PO: 2025-01-01"


def test_clean_text_passes_through():
    assert sanitize_answer("X") == "X"
    assert sanitize_answer("  X \n") == "X"


def test_opener_without_newline():
    assert sanitize_answer("```markdownX```") == "X"


def test_plain_fences_are_left_alone_at_the_start():
    # Only the ```markdown opener is recognised; a bare closing fence is still removed.
    assert sanitize_answer("```\nX\n```") == "```\nX"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "X",
        "```markdown\nX\n```",
        "  ```markdown\n```markdown\nX\n```\n```  ",
        "```markdown\n\n```",
        "Answer with code:\n```python\nprint(1)\n```",
    ],
)
def test_idempotent(raw):
    once = sanitize_answer(raw)
    assert sanitize_answer(once) == once
