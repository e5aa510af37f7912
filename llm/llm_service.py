"""LLM completion client for supply-chain answers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, cast

import litellm
import yaml
from langfuse import Langfuse

from core.env import AskSettings
from core.logging import get_logger
from llm.prompts import supply_chain_qa

logger = get_logger(__name__)

DEFAULT_LITELLM_CONFIG = Path(__file__).resolve().parent.parent / "litellm_config.yaml"
NO_ANSWER = "No answer."


class LLMServiceError(RuntimeError):
    """Completion failed or returned something other than text."""


def _apply_litellm_aliases(config_path: Optional[str] = None) -> Dict[str, str]:
    """Register ``model_name -> litellm_params.model`` aliases from a LiteLLM config file."""

    path_value = config_path or os.getenv("LITELLM_CONFIG_PATH")
    path = Path(path_value) if path_value else DEFAULT_LITELLM_CONFIG
    if not path.is_file():
        return {}
    try:
        config = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to parse LiteLLM config for aliases: %s", exc)
        return {}
    model_list = config.get("model_list") if isinstance(config, dict) else None
    if not isinstance(model_list, list):
        return {}
    alias_map: Dict[str, str] = {}
    for entry in model_list:
        if not isinstance(entry, dict):
            continue
        alias = entry.get("model_name")
        params = entry.get("litellm_params")
        if not alias or not isinstance(params, dict):
            continue
        target = params.get("model")
        if isinstance(target, str) and target:
            alias_map.setdefault(alias, target)
    if alias_map:
        litellm.model_alias_map.update(alias_map)
    return alias_map


def _extract_usage_payload(response: Any) -> Optional[Dict[str, int]]:
    """Normalize token usage info from various response shapes."""

    def _normalize(raw: Any) -> Optional[Dict[str, int]]:
        if raw is None:
            return None
        if isinstance(raw, dict):
            data = raw
        else:
            data = {key: getattr(raw, key, None) for key in ("prompt_tokens", "completion_tokens", "total_tokens")}
        cleaned = {key: int(value) for key, value in data.items() if isinstance(value, (int, float))}
        return cleaned or None

    payload = _normalize(getattr(response, "usage", None))
    if payload:
        return payload
    if isinstance(response, dict):
        return _normalize(response.get("usage"))
    return None


def _choice_content(response: Any) -> Optional[str]:
    """First choice's message content, or ``None`` when it is missing or not text."""

    response_any = cast(Any, response)
    choices = getattr(response_any, "choices", None)
    if choices is None and isinstance(response_any, Mapping):
        choices = response_any.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first_choice = choices[0]
    message = getattr(first_choice, "message", None)
    if message is None and isinstance(first_choice, Mapping):
        message = first_choice.get("message")
    if message is None:
        return None
    if isinstance(message, Mapping):
        content = message.get("content")
    else:
        content = getattr(message, "content", None)
    return content if isinstance(content, str) else None


def build_langfuse_client() -> Optional[Langfuse]:
    """Langfuse tracer when both keys are configured, otherwise ``None``."""

    public_key = os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = os.getenv("LANGFUSE_SECRET_KEY")
    if not (public_key and secret_key):
        return None
    try:
        client = Langfuse(public_key=public_key, secret_key=secret_key, host=os.getenv("LANGFUSE_HOST"))
    except Exception as exc:
        logger.error("Failed to initialise Langfuse client: %s", exc, exc_info=True)
        return None
    logger.info("Langfuse client initialised.")
    return client


class CompletionClient:
    """One blocking chat completion per call. No retries, no fallback model."""

    def __init__(
        self,
        *,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 1000,
        tracer: Optional[Any] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.tracer = tracer

    @classmethod
    def from_settings(cls, settings: AskSettings, *, tracer: Optional[Any] = None) -> "CompletionClient":
        _apply_litellm_aliases()
        return cls(
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            tracer=tracer,
        )

    def complete(self, system_prompt: str, question: str) -> str:
        messages = supply_chain_qa.get_prompt(system_prompt, question)
        try:
            response = litellm.completion(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            logger.error("LLM call failed for %s: %s", self.model, exc, exc_info=True)
            self._record_trace(messages, error=str(exc))
            raise LLMServiceError(f"LLM call failed for model {self.model}: {exc}") from exc

        content = _choice_content(response)
        if content is None:
            self._record_trace(messages, error="non-text completion")
            raise LLMServiceError(f"LLM returned no text content for model {self.model}")
        self._record_trace(messages, response_content=content, usage=_extract_usage_payload(response))
        return content or NO_ANSWER

    def _record_trace(
        self,
        messages: List[Dict[str, Any]],
        *,
        response_content: Optional[str] = None,
        error: Optional[str] = None,
        usage: Optional[Dict[str, int]] = None,
    ) -> None:
        if self.tracer is None:
            return
        try:
            user_input = ""
            if messages:
                last_message = messages[-1].get("content")
                user_input = last_message if isinstance(last_message, str) else json.dumps(last_message)
            metadata: Dict[str, Any] = {}
            if error:
                metadata["error"] = error
            if usage:
                metadata["usage"] = usage
            trace = self.tracer.trace(name="supply_chain_ask", metadata={"model": self.model})
            trace.generation(
                name="completion",
                model=self.model,
                input=user_input[:2000],
                output=(response_content or "")[:2000],
                metadata=metadata or None,
            )
            if error:
                trace.update(status="error")
            self.tracer.flush()
        except Exception as exc:
            logger.debug("Langfuse logging skipped: %s", exc, exc_info=True)


__all__ = [
    "CompletionClient",
    "LLMServiceError",
    "NO_ANSWER",
    "build_langfuse_client",
]
