"""
test_orchestrator.py
====================
Tests for AI-first, rules-second orchestration and envelope tagging.
"""

import re

import pytest

from copilot.analyzers.controller_analyzer import analyze_controller
from copilot.analyzers.openapi_inferrer import infer_openapi
from copilot.core.errors import AnalyzerFault, InputError
from copilot.models.envelopes import (
    AUTH_UNAVAILABLE_NOTE, FALLBACK_NOTE, AIPowered, RuleBasedFallback, RuleBasedOnly
)
from copilot.services.llm_service import AI_UNAVAILABLE, LLMService
from copilot.services.orchestrator import (
    AnalysisOrchestrator, AuthFlowOrchestrator, OpenAPIOrchestrator, Orchestrator
)

CONTROLLER = '''
const createUser = async (req, res) => {
  const user = await User.create(req.body);
  console.log(user);
  res.status(201).json(user);
};
'''

ROUTE = 'app.post("/api/users", createUser)'

ENVELOPE_KEYS = {"source", "note", "timestamp"}


def payload_of(envelope) -> dict:
    return {k: v for k, v in envelope.to_dict().items() if k not in ENVELOPE_KEYS}


def wire(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


# ─── Fallback ─────────────────────────────────────────────────────────────────

def test_analysis_falls_back_when_disabled():
    envelope = AnalysisOrchestrator(LLMService()).run(CONTROLLER)

    assert isinstance(envelope, RuleBasedFallback)
    body = envelope.to_dict()
    assert body["source"] == "rule-based-fallback"
    assert body["note"] == FALLBACK_NOTE


def test_analysis_fallback_matches_analyzer_exactly():
    envelope = AnalysisOrchestrator(LLMService()).run(CONTROLLER)
    assert payload_of(envelope) == wire(analyze_controller(CONTROLLER))


def test_openapi_fallback_matches_inferrer_exactly():
    envelope = OpenAPIOrchestrator(LLMService()).run(ROUTE)
    assert isinstance(envelope, RuleBasedFallback)
    assert payload_of(envelope) == wire(infer_openapi(ROUTE))


def test_fallback_on_schema_violation(enabled_service):
    service = enabled_service(content={"method": "FETCH", "path": "/x", "responses": {}})
    envelope = OpenAPIOrchestrator(service).run(ROUTE)
    assert isinstance(envelope, RuleBasedFallback)
    assert envelope.data.path == "/api/users"


def test_fallback_on_model_error(enabled_service):
    envelope = AnalysisOrchestrator(enabled_service(error=TimeoutError("slow"))).run(CONTROLLER)
    assert isinstance(envelope, RuleBasedFallback)


def test_fallback_syntax_error_is_surfaced():
    with pytest.raises(InputError, match="Syntax error: Code is empty"):
        AnalysisOrchestrator(LLMService()).run("")


# ─── AI-powered ───────────────────────────────────────────────────────────────

def test_ai_result_is_tagged(enabled_service):
    content = {"complexity": 20, "issues": ["a"], "suggestions": ["b"]}
    envelope = AnalysisOrchestrator(enabled_service(content=content)).run(CONTROLLER)

    assert isinstance(envelope, AIPowered)
    body = envelope.to_dict()
    assert body["source"] == "ai-powered"
    assert "note" not in body
    assert body["complexity"] == 20
    assert body["issues"] == ["a"]
    assert "securityConcerns" not in body


def test_ai_openapi_is_tagged(enabled_service):
    content = {"method": "POST", "path": "/api/users", "responses": {"201": {"description": "Created"}}}
    envelope = OpenAPIOrchestrator(enabled_service(content=content)).run(ROUTE)
    assert isinstance(envelope, AIPowered)
    assert envelope.to_dict()["responses"] == {"201": {"description": "Created"}}


def test_ai_auth_review_is_tagged(enabled_service):
    content = {"vulnerabilities": [], "recommendations": ["Rotate keys"], "riskLevel": "LOW"}
    envelope = AuthFlowOrchestrator(enabled_service(content=content)).run("passport.use(strategy)")
    assert isinstance(envelope, AIPowered)
    assert envelope.to_dict()["riskLevel"] == "LOW"


# ─── Auth rule-based-only ─────────────────────────────────────────────────────

def test_auth_without_model_is_rule_based_only():
    envelope = AuthFlowOrchestrator(LLMService()).run("router.use(auth)")

    assert isinstance(envelope, RuleBasedOnly)
    body = envelope.to_dict()
    assert body["source"] == "rule-based-only"
    assert body["note"] == AUTH_UNAVAILABLE_NOTE
    assert body["vulnerabilities"] == [AI_UNAVAILABLE]
    assert len(body["recommendations"]) == 1
    assert "OPENAI_API_KEY" in body["recommendations"][0]
    assert body["riskLevel"] == "UNKNOWN"


def test_auth_without_model_accepts_empty_code():
    """No rule-based pass runs on the code, so there is nothing to reject."""
    assert isinstance(AuthFlowOrchestrator(LLMService()).run(""), RuleBasedOnly)


# ─── Safety net ───────────────────────────────────────────────────────────────

def test_unexpected_fallback_error_becomes_analyzer_fault(monkeypatch):
    def broken(code):
        raise KeyError("lines")

    monkeypatch.setattr("copilot.services.orchestrator.analyze_controller", broken)
    with pytest.raises(AnalyzerFault, match="lines"):
        AnalysisOrchestrator(LLMService()).run(CONTROLLER)


def test_unexpected_attempt_error_becomes_analyzer_fault(monkeypatch):
    service = LLMService()
    monkeypatch.setattr(service, "generate_openapi", lambda code: 1 / 0)
    with pytest.raises(AnalyzerFault, match="division by zero"):
        OpenAPIOrchestrator(service).run(ROUTE)


# ─── Base class ───────────────────────────────────────────────────────────────

def test_incomplete_orchestrator_cannot_be_built():
    class AttemptOnly(Orchestrator):
        capability = "partial"

        def attempt(self, code):
            return self.service.analyze_controller(code)

    with pytest.raises(TypeError):
        AttemptOnly(LLMService())
    with pytest.raises(TypeError):
        Orchestrator(LLMService())


# ─── Envelope ─────────────────────────────────────────────────────────────────

def test_timestamp_is_iso8601_utc():
    envelope = OpenAPIOrchestrator(LLMService()).run(ROUTE)
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", envelope.timestamp)


def test_envelope_is_immutable():
    envelope = OpenAPIOrchestrator(LLMService()).run(ROUTE)
    with pytest.raises(AttributeError):
        envelope.note = "changed"


def test_envelope_fields_come_first():
    body = AnalysisOrchestrator(LLMService()).run(CONTROLLER).to_dict()
    assert list(body)[:3] == ["source", "note", "timestamp"]
