"""
schemas.py
==========
Pydantic models for request/response validation.
These define the exact shape of data going in and out of the API,
and double as the contracts that model output is validated against.

Field names are snake_case; the wire format keeps the camelCase names
(securityConcerns, requestBody, requiredRoles, ...) through aliases.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Level(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class ParameterLocation(str, Enum):
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"


class Shape(BaseModel):
    """Base for every contract: accepts both field names and wire aliases."""
    model_config = ConfigDict(populate_by_name=True)


# ─── Request Models ────────────────────────────────────────────────────────────

class CodeRequest(BaseModel):
    """Body of every code-based endpoint."""
    code: str = Field(..., description="Backend source snippet to inspect")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"code": "app.get(\"/api/users\", async (req, res) => { res.json(await User.find()) })"}
        }
    )


# ─── Syntax Check ──────────────────────────────────────────────────────────────

class SyntaxCheckResult(Shape):
    valid: bool
    errors: Optional[List[str]] = None
    warnings: Optional[List[str]] = None


# ─── Controller Analysis ───────────────────────────────────────────────────────

class Complexity(Shape):
    score: int = Field(..., ge=0, le=100)
    level: Level
    issues: List[str] = Field(default_factory=list)


class Validations(Shape):
    missing: List[str] = Field(default_factory=list)
    present: List[str] = Field(default_factory=list)


class AnalysisReport(Shape):
    """Rule-based code-quality report."""
    complexity: Complexity
    validations: Validations
    suggestions: List[str] = Field(default_factory=list)
    security_concerns: Optional[List[str]] = Field(None, alias="securityConcerns")


class AIAnalysis(Shape):
    """What the model is asked to return for a controller analysis."""
    complexity: float = Field(..., ge=0, le=100, description="Complexity score")
    issues: List[str]
    suggestions: List[str]
    security_concerns: Optional[List[str]] = Field(None, alias="securityConcerns")
    estimated_refactor_time: Optional[str] = Field(None, alias="estimatedRefactorTime")


# ─── OpenAPI ───────────────────────────────────────────────────────────────────

class MediaTypeObject(Shape):
    schema_: Dict[str, Any] = Field(..., alias="schema")


class Parameter(Shape):
    name: str
    location: ParameterLocation = Field(..., alias="in")
    required: bool
    type: str
    description: Optional[str] = None


class RequestBody(Shape):
    description: Optional[str] = None
    content: Dict[str, MediaTypeObject]


class ResponseObject(Shape):
    description: str
    content: Optional[Dict[str, MediaTypeObject]] = None


def _is_status_key(key: str) -> bool:
    if key == "default":
        return True
    return len(key) == 3 and key.isdigit() and 100 <= int(key) <= 599


class OpenAPIFragment(Shape):
    """A single OpenAPI operation, keyed by method and path."""
    method: HttpMethod
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: Optional[List[Parameter]] = None
    request_body: Optional[RequestBody] = Field(None, alias="requestBody")
    responses: Dict[str, ResponseObject]
    security: Optional[List[Dict[str, Any]]] = None

    @field_validator("responses")
    @classmethod
    def responses_keyed_by_status(cls, v):
        if not v:
            raise ValueError("at least one response is required")
        for key in v:
            if not _is_status_key(key):
                raise ValueError(f"'{key}' is not an HTTP status code or 'default'")
        return v


# ─── Auth ──────────────────────────────────────────────────────────────────────

class AuthRoute(Shape):
    path: str
    method: str
    middleware: Optional[List[str]] = None
    roles: Optional[List[str]] = None


class AuthConfig(Shape):
    routes: List[AuthRoute]
    middleware: Dict[str, List[str]] = Field(default_factory=dict)
    # Accepted for completeness; role implication is not resolved.
    role_hierarchy: Dict[str, List[str]] = Field(default_factory=dict, alias="roleHierarchy")


class AuthValidationRequest(BaseModel):
    config: AuthConfig

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "config": {
                    "routes": [
                        {"path": "/api/users", "method": "GET", "middleware": []},
                        {"path": "/api/admin", "method": "POST", "middleware": ["auth"], "roles": ["admin"]},
                    ],
                    "middleware": {"auth": ["admin", "user"]},
                    "roleHierarchy": {},
                }
            }
        }
    )


class Leak(Shape):
    route: str
    method: str
    severity: Severity


class Mismatch(Shape):
    route: str
    method: str
    required_roles: List[str] = Field(..., alias="requiredRoles")
    assigned_roles: List[str] = Field(..., alias="assignedRoles")


class AuthValidationReport(Shape):
    leaks: List[Leak] = Field(default_factory=list)
    mismatches: List[Mismatch] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class AuthFlowReview(Shape):
    """What the model is asked to return for an auth-flow review."""
    vulnerabilities: List[str]
    recommendations: List[str]
    risk_level: Level = Field(..., alias="riskLevel")


class AuthFlowUnavailable(Shape):
    """Static auth-flow answer when the model cannot be used."""
    vulnerabilities: List[str]
    recommendations: List[str]
    risk_level: Literal["UNKNOWN"] = Field("UNKNOWN", alias="riskLevel")


# ─── System ────────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    features: List[str]
    ai_enabled: bool
    model_backend: str
    documentation: str

    model_config = ConfigDict(protected_namespaces=())


class ErrorResponse(BaseModel):
    error: str
    message: str
