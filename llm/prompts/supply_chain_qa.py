"""Prompt builder for supply-chain questions answered from analytics rows."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from services.query_sources import QuerySource

ROLE_STATEMENT = (
    "You are a Supply Chain Intelligence Assistant. "
    "Answer STRICTLY based on the {source_count} datasets below."
)

GUIDELINES = (
    "1. **Check All Sources:** If the user names a supplier or item, check every source above, "
    "not just the first match.",
    "2. **Prioritize True Cost:** Quote the 'True Cost' (landed cost) figure over the nominal unit price "
    "when reporting what was paid.",
    "3. **Prioritize Facts:** For volume questions use the [STATS] order counts (ISL/MBS/ICL).",
    "4. **Compare:** If a recent Quote is lower than the last PO for the same item, say so and "
    "call out the improvement.",
    "5. **Direct Answer:** No preamble or fluff. Start with the data.",
)

EXAMPLE_OUTPUT = """Last 2 POs for Schneider:
1. 2025-11-12: MCB 10A (Qty 100) @ 45,000 IDR True Cost
2. 2025-10-01: Fuse Holder (Qty 50) @ 12,500 IDR True Cost

We also have an active Quote (2025-12-01) offering MCB 10A at 42,000 IDR."""


def format_section(index: int, source: QuerySource, block: str) -> str:
    body = block if block else source.placeholder
    return f"=== SOURCE {index}: {source.heading} ===\n* {source.note}\n{body}"


def build_prompt(question: str, sources: Sequence[QuerySource], blocks: Mapping[str, str]) -> str:
    """Assemble the instruction document sent as the system message.

    A source with an empty block gets its placeholder text instead.
    """

    sections = [
        format_section(index, source, blocks.get(source.name, ""))
        for index, source in enumerate(sources, start=1)
    ]
    parts = [
        ROLE_STATEMENT.format(source_count=len(sources)),
        f'USER QUESTION: "{question}"',
        *sections,
        "GUIDELINES:\n" + "\n".join(GUIDELINES),
        "EXAMPLE OUTPUT:\n" + EXAMPLE_OUTPUT,
    ]
    return "\n\n".join(parts)


def get_prompt(system_prompt: str, question: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": question},
    ]


__all__ = ["GUIDELINES", "build_prompt", "format_section", "get_prompt"]
