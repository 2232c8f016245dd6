"""
openapi_inferrer.py
===================
Best-effort OpenAPI operation from a route snippet.
First verb call and first quoted string win; there is no disambiguation
between several route-like tokens.
"""

import re

from loguru import logger

from copilot.models.schemas import HttpMethod, OpenAPIFragment, ResponseObject
from copilot.rules.syntax_checker import require_valid_syntax

METHOD_PATTERN = re.compile(r"(get|post|put|delete|patch)\s*\(", re.IGNORECASE)
PATH_PATTERN = re.compile(r"['\"`]([^'\"`]+)['\"`]")

DEFAULT_PATH = "/api/unknown"


def infer_openapi(code: str) -> OpenAPIFragment:
    """
    Raises:
        InputError: the snippet fails the syntax check
    """
    require_valid_syntax(code)

    method_match = METHOD_PATTERN.search(code)
    path_match = PATH_PATTERN.search(code)

    method = HttpMethod(method_match.group(1).upper()) if method_match else HttpMethod.GET
    path = path_match.group(1) if path_match else DEFAULT_PATH
    logger.debug(f"Inferred {method.value} {path}")

    return OpenAPIFragment(
        method=method,
        path=path,
        description="Auto-generated OpenAPI specification",
        responses={
            "200": ResponseObject(description="Successful response"),
            "500": ResponseObject(description="Server error"),
        },
    )
