# backend/app/core/llm.py

import json
import re
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAI

from app.core.config_loader import settings
from app.core.errors import ApiError
from app.core.fallback import FallbackExhausted, run_fallback_chain
from app.core.logger import logger


_client: Optional[OpenAI] = None

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


def get_client() -> OpenAI:
    """OpenAI client, created on first use so a missing key only breaks AI routes."""
    global _client
    if not settings.OPENAI_API_KEY:
        logger.critical("OPENAI_API_KEY is missing, AI generation is disabled")
        raise ApiError.internal("AI service not configured", code="AI_CONFIG_ERROR")
    if _client is None:
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def _chat(model: str, prompt: str, json_mode: bool = False) -> str:
    kwargs: Dict[str, Any] = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    completion = get_client().chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        temperature=settings.AI_TEMPERATURE,
        **kwargs,
    )
    content = completion.choices[0].message.content
    if not content:
        raise ValueError(f"{model} returned empty content")
    return content


# ---------------------------------------------------------------------------
# RESPONSE NORMALIZATION
# ---------------------------------------------------------------------------
def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers the models like to wrap JSON in."""
    return _FENCE_RE.sub("", text or "").strip()


def parse_model_json(text: str) -> Dict[str, Any]:
    """
    Parse a model answer into a JSON object.

    Raises ValueError when the answer holds no JSON object; the caller
    treats that like any other model failure.
    """
    content = strip_code_fences(text)
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # Models sometimes chat before/after the payload
        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("model output is not JSON")
        try:
            data = json.loads(content[start:end + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"model output is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# MODEL FALLBACK
# ---------------------------------------------------------------------------
class ModelFallbackInvoker:
    """
    Try each model in priority order until one returns a parseable JSON object.

    Calls are sequential on purpose: the API is billed per call, so models
    are never raced against each other. A model is tried at most once.
    """

    def __init__(self, models: Optional[List[str]] = None,
                 generate: Optional[Callable[..., str]] = None):
        self.models = list(models) if models is not None else list(settings.AI_MODELS)
        self._generate = generate

    def _attempt(self, model: str, prompt: str, json_mode: bool) -> Dict[str, Any]:
        logger.info(f"Attempting generation with model: {model}")
        generate = self._generate or _chat
        return parse_model_json(generate(model, prompt, json_mode=json_mode))

    def invoke(self, prompt: str, json_mode: bool = False) -> Dict[str, Any]:
        if self._generate is None:
            get_client()

        attempts = [(m, partial(self._attempt, m, prompt, json_mode)) for m in self.models]
        try:
            model, data = run_fallback_chain(attempts, label="ai-generation")
        except FallbackExhausted as e:
            for model, err in e.errors:
                logger.error(f"Model {model} failed: {err}")
            details = None
            if settings.AI_DEBUG_ERRORS and e.last_error is not None:
                details = {"lastError": str(e.last_error)}
            raise ApiError.internal(
                "All AI models failed to respond",
                code="AI_GENERATION_ERROR",
                details=details,
            ) from e

        logger.info(f"Generation succeeded with model: {model}")
        return data
