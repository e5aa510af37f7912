"""Question -> keywords -> source fan-out -> prompt -> LLM -> cleaned answer."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from core.logging import get_logger
from llm.llm_service import LLMServiceError
from llm.prompts.supply_chain_qa import build_prompt
from services.answer_sanitizer import sanitize_answer
from services.context_fanout import SessionFactory, SourceQueryError, fetch_context
from services.context_formatter import format_context
from services.keyword_extractor import extract_keywords
from services.query_sources import DEFAULT_PROFILE, get_profile

logger = get_logger(__name__)


class CompletionBackend(Protocol):
    def complete(self, system_prompt: str, question: str) -> str: ...


class AskPipelineError(RuntimeError):
    """A source query or the LLM call failed; the request cannot be answered."""


@dataclass(frozen=True)
class AskResult:
    answer: str
    keywords: List[str]
    prompt: str
    row_counts: Dict[str, int] = field(default_factory=dict)


class AskService:
    """Stateless per-request pipeline over injected store and LLM handles."""

    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        completion_client: CompletionBackend,
        tolerate_source_failures: bool = False,
    ) -> None:
        self.session_factory = session_factory
        self.completion_client = completion_client
        self.tolerate_source_failures = tolerate_source_failures

    async def answer(self, question: str, *, profile: str = DEFAULT_PROFILE) -> AskResult:
        sources = get_profile(profile)
        keywords = extract_keywords(question)
        logger.info("Ask [%s] keywords=%s", profile, keywords)

        try:
            rows_by_source = await fetch_context(
                keywords,
                sources,
                session_factory=self.session_factory,
                tolerate_failures=self.tolerate_source_failures,
            )
        except SourceQueryError as exc:
            logger.exception("Context fan-out aborted by %s", exc.source_name)
            raise AskPipelineError(str(exc)) from exc

        blocks = format_context(sources, rows_by_source)
        prompt = build_prompt(question, sources, blocks)

        try:
            raw_answer = await asyncio.to_thread(self.completion_client.complete, prompt, question)
        except LLMServiceError as exc:
            raise AskPipelineError(str(exc)) from exc

        return AskResult(
            answer=sanitize_answer(raw_answer),
            keywords=keywords,
            prompt=prompt,
            row_counts={name: len(rows) for name, rows in rows_by_source.items()},
        )


__all__ = ["AskPipelineError", "AskResult", "AskService", "CompletionBackend"]
