"""
llm_service.py
==============
Schema-checked calls to the OpenAI chat API.

The service is either enabled (credential present AND AI_ENABLED) or
disabled, decided once at construction. `invoke` never raises: every
failure comes back as an `InvocationResult` with success=False, which is
what lets the orchestrators fall back to the rule-based analyzers.

One attempt per call. The client is built with max_retries=0 so a failed
request falls through to the rule-based path immediately.
"""

from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar

from loguru import logger
from openai import OpenAI, OpenAIError
from pydantic import BaseModel

from copilot.core.config import Settings, settings
from copilot.core.errors import CopilotError, UpstreamUnavailable
from copilot.models.schemas import AIAnalysis, AuthFlowReview, OpenAPIFragment
from copilot.services.json_guard import check_shape, parse_json, sanitize
from copilot.services.prompts import SYSTEM_PROMPT, get_prompt, render_prompt

T = TypeVar("T", bound=BaseModel)

AI_UNAVAILABLE = "AI service not available"


@dataclass(frozen=True)
class InvocationResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "InvocationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "InvocationResult[T]":
        return cls(success=False, error=error)


class LLMService:
    """Wraps the OpenAI client and validates what comes back."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        enabled: bool = False,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        client=None,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = None

        if api_key and enabled:
            self._client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
            logger.info(f"✅ AI integration enabled ({model})")
        else:
            logger.info("⚠️ AI integration disabled, rule-based analysis only")

    @classmethod
    def from_settings(cls, config: Settings) -> "LLMService":
        return cls(
            api_key=config.OPENAI_API_KEY,
            enabled=config.AI_ENABLED,
            model=config.OPENAI_MODEL,
            temperature=config.TEMPERATURE,
            max_tokens=config.MAX_TOKENS,
            timeout=config.REQUEST_TIMEOUT,
        )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def backend_name(self) -> str:
        return "openai" if self.enabled else "rule-based"

    def _complete(self, prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise UpstreamUnavailable(f"Model request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamUnavailable("No response from AI")
        return content

    def invoke(self, code: str, shape: Type[T], prompt_template: str) -> InvocationResult[T]:
        """
        Ask the model for JSON matching `shape`.

        Returns a failed result (never raises) when the service is disabled,
        the request fails, or the output is not valid JSON for `shape`.
        """
        if not self.enabled:
            return InvocationResult.failed(AI_UNAVAILABLE)

        try:
            content = self._complete(render_prompt(prompt_template, code))
            data = check_shape(sanitize(parse_json(content)), shape)
        except CopilotError as e:
            logger.warning(f"AI invocation failed | shape={shape.__name__} | {e}")
            return InvocationResult.failed(str(e))
        except Exception as e:
            logger.exception(f"Unexpected AI invocation error | shape={shape.__name__}")
            return InvocationResult.failed(str(e))

        return InvocationResult.ok(data)

    # ── Specializations ─────────────────────────────────

    def analyze_controller(self, code: str) -> InvocationResult[AIAnalysis]:
        return self.invoke(code, AIAnalysis, get_prompt("analysis"))

    def generate_openapi(self, code: str) -> InvocationResult[OpenAPIFragment]:
        return self.invoke(code, OpenAPIFragment, get_prompt("openapi"))

    def validate_auth_flow(self, code: str) -> InvocationResult[AuthFlowReview]:
        return self.invoke(code, AuthFlowReview, get_prompt("auth"))


# Singleton instance — built once on first use, never reconfigured
_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    global _service
    if _service is None:
        _service = LLMService.from_settings(settings)
    return _service
