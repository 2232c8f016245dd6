"""
prompts.py
==========
Prompt templates for the three AI capabilities.
Each template carries a `{{code}}` placeholder; the code is substituted
verbatim (no str.format, snippets are full of braces).
"""

CODE_PLACEHOLDER = "{{code}}"

SYSTEM_PROMPT = "You are a backend code analyzer. Return ONLY valid JSON."

OPENAPI_PROMPT = """You are an API documentation specialist. Analyze the following backend code and generate an OpenAPI 3.0 operation.

CODE:
{{code}}

INSTRUCTIONS:
1. Extract HTTP method, path, and route parameters
2. Identify request/response schemas
3. Determine authentication requirements
4. List possible error responses
5. Provide clear descriptions

OUTPUT FORMAT (JSON ONLY):
{
  "method": "GET|POST|PUT|DELETE|PATCH",
  "path": "/api/endpoint",
  "summary": "Brief description",
  "description": "Detailed description",
  "parameters": [
    {"name": "paramName", "in": "query|path|header|cookie", "required": true, "type": "string|number|boolean"}
  ],
  "requestBody": {
    "description": "Request body description",
    "content": {"application/json": {"schema": {}}}
  },
  "responses": {
    "200": {"description": "Success response"},
    "400": {"description": "Bad request"},
    "500": {"description": "Server error"}
  },
  "security": []
}
"""

ANALYSIS_PROMPT = """Analyze the following backend controller code for code quality and best practices.

CODE:
{{code}}

ANALYSIS CRITERIA:
1. Code complexity (cyclomatic complexity)
2. Security vulnerabilities
3. Performance issues
4. Missing error handling
5. Code duplication opportunities
6. REST API best practices compliance

OUTPUT FORMAT (JSON ONLY):
{
  "complexity": 45,
  "issues": ["issue1", "issue2"],
  "suggestions": ["suggestion1", "suggestion2"],
  "securityConcerns": ["concern1", "concern2"],
  "estimatedRefactorTime": "2 hours"
}

"complexity" is an integer score from 0 to 100.
"""

AUTH_PROMPT = """Analyze the following authentication/authorization code for security issues.

CODE:
{{code}}

Look for unprotected routes, missing or bypassable middleware, weak token
handling, hardcoded secrets, and role checks that can be skipped.

OUTPUT FORMAT (JSON ONLY):
{
  "vulnerabilities": ["vulnerability1", "vulnerability2"],
  "recommendations": ["recommendation1", "recommendation2"],
  "riskLevel": "LOW|MEDIUM|HIGH|CRITICAL"
}
"""

PROMPTS = {
    "openapi": OPENAPI_PROMPT,
    "analysis": ANALYSIS_PROMPT,
    "auth": AUTH_PROMPT,
}


def get_prompt(kind: str) -> str:
    try:
        return PROMPTS[kind]
    except KeyError:
        raise ValueError(f"Unknown prompt kind: {kind}") from None


def render_prompt(template: str, code: str) -> str:
    return template.replace(CODE_PLACEHOLDER, code)
