"""
auth_validator.py
=================
Checks a declared route/middleware map for unprotected routes (leaks)
and routes whose middleware grants none of the roles they require
(mismatches).

Known limitation: `roleHierarchy` is accepted but never consulted, so
a role that implies another does not satisfy it here.
"""

from loguru import logger

from copilot.models.schemas import (
    AuthConfig, AuthRoute, AuthValidationReport, Leak, Mismatch, Severity
)

LEAK_SUGGESTION = "Add authentication middleware to unprotected routes"
MISMATCH_SUGGESTION = "Review role assignments for route protection"


def leak_severity(route: AuthRoute) -> Severity:
    return Severity.HIGH if "/api/" in route.path else Severity.MEDIUM


def find_leaks(config: AuthConfig) -> list:
    return [
        Leak(route=route.path, method=route.method, severity=leak_severity(route))
        for route in config.routes
        if not route.middleware
    ]


def find_mismatches(config: AuthConfig) -> list:
    mismatches = []
    for route in config.routes:
        if route.roles is None or route.middleware is None:
            continue
        # One entry per offending middleware reference, no dedup
        for name in route.middleware:
            granted = config.middleware.get(name)
            if granted is None:
                continue
            if not any(role in granted for role in route.roles):
                mismatches.append(Mismatch(
                    route=route.path,
                    method=route.method,
                    required_roles=list(route.roles),
                    assigned_roles=list(granted),
                ))
    return mismatches


def validate_auth(config: AuthConfig) -> AuthValidationReport:
    leaks = find_leaks(config)
    mismatches = find_mismatches(config)

    suggestions = []
    if leaks:
        suggestions.append(LEAK_SUGGESTION)
    if mismatches:
        suggestions.append(MISMATCH_SUGGESTION)

    logger.debug(
        f"Auth validation | routes={len(config.routes)} | "
        f"leaks={len(leaks)} | mismatches={len(mismatches)}"
    )
    return AuthValidationReport(leaks=leaks, mismatches=mismatches, suggestions=suggestions)
