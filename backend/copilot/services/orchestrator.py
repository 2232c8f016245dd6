"""
orchestrator.py
===============
AI first, rules second.

Each capability tries its LLMService specialization; a failed
InvocationResult (never an exception) sends it to the matching
rule-based analyzer. The orchestrator is the only place that builds
envelopes, and the outermost safety net for unexpected errors.
"""

from abc import ABC, abstractmethod

from loguru import logger

from copilot.analyzers.controller_analyzer import analyze_controller
from copilot.analyzers.openapi_inferrer import infer_openapi
from copilot.core.errors import AnalyzerFault, InputError
from copilot.models.envelopes import AIPowered, ResultEnvelope, RuleBasedFallback, RuleBasedOnly
from copilot.models.schemas import AuthFlowUnavailable
from copilot.services.llm_service import AI_UNAVAILABLE, InvocationResult, LLMService

CONFIGURE_CREDENTIALS = "Set OPENAI_API_KEY and AI_ENABLED=true to enable AI auth review"


class Orchestrator(ABC):
    capability = "base"

    def __init__(self, service: LLMService):
        self.service = service

    @abstractmethod
    def attempt(self, code: str) -> InvocationResult:
        """Ask the model; must not raise on model failure."""

    @abstractmethod
    def fallback(self, code: str) -> ResultEnvelope:
        """Rule-based answer used when the attempt fails."""

    def run(self, code: str) -> ResultEnvelope:
        """
        Raises:
            InputError: the fallback rejected the code (syntax error)
            AnalyzerFault: anything unexpected on either path
        """
        try:
            result = self.attempt(code)
            if result.success:
                logger.info(f"{self.capability} | source=ai-powered")
                return AIPowered(data=result.data)

            logger.info(f"{self.capability} | falling back to rules: {result.error}")
            return self.fallback(code)

        except InputError:
            raise
        except Exception as e:
            logger.exception(f"{self.capability} failed")
            raise AnalyzerFault(str(e)) from e


class AnalysisOrchestrator(Orchestrator):
    capability = "analysis"

    def attempt(self, code: str) -> InvocationResult:
        return self.service.analyze_controller(code)

    def fallback(self, code: str) -> ResultEnvelope:
        return RuleBasedFallback(data=analyze_controller(code))


class OpenAPIOrchestrator(Orchestrator):
    capability = "openapi"

    def attempt(self, code: str) -> InvocationResult:
        return self.service.generate_openapi(code)

    def fallback(self, code: str) -> ResultEnvelope:
        return RuleBasedFallback(data=infer_openapi(code))


class AuthFlowOrchestrator(Orchestrator):
    """
    Code-based auth review has no rule-based twin: the route validator
    works on an AuthConfig, not on source. Without the model we can only
    say so.
    """
    capability = "auth"

    def attempt(self, code: str) -> InvocationResult:
        return self.service.validate_auth_flow(code)

    def fallback(self, code: str) -> ResultEnvelope:
        return RuleBasedOnly(data=AuthFlowUnavailable(
            vulnerabilities=[AI_UNAVAILABLE],
            recommendations=[CONFIGURE_CREDENTIALS],
        ))
