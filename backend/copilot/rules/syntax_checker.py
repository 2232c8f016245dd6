"""
syntax_checker.py
=================
Cheap text-level sanity checks run before any rule-based analysis.
Not a parser: every rule is an independent substring/count scan.
"""

from copilot.core.errors import InputError
from copilot.models.schemas import SyntaxCheckResult


def check_syntax(code: str) -> SyntaxCheckResult:
    errors = []
    warnings = []

    if not code.strip():
        errors.append("Code is empty")

    if "const" in code and "=" not in code:
        warnings.append("Const declaration without assignment")

    open_parens = code.count("(")
    close_parens = code.count(")")
    if open_parens != close_parens:
        warnings.append(
            f"Mismatched parentheses: {open_parens} opening vs {close_parens} closing"
        )

    if "=>" not in code and "function" not in code:
        warnings.append("No function definition found")

    return SyntaxCheckResult(
        valid=not errors,
        errors=errors or None,
        warnings=warnings or None,
    )


def require_valid_syntax(code: str) -> SyntaxCheckResult:
    """Run check_syntax and abort the caller's analysis on any error."""
    result = check_syntax(code)
    if not result.valid:
        raise InputError(f"Syntax error: {', '.join(result.errors or [])}")
    return result
