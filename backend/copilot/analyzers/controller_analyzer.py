"""
controller_analyzer.py
======================
Rule-based code-quality report for a controller snippet.

Complexity is a line-count proxy and the issues are substring
heuristics. `validations` and `suggestions` are constant for now;
they do not yet vary with the code.
"""

from loguru import logger

from copilot.models.schemas import AnalysisReport, Complexity, Level, Validations
from copilot.rules.syntax_checker import require_valid_syntax

VALIDATION_TOKENS = ("validate", "zod", "joi")

MISSING_VALIDATIONS = ["input-validation", "error-handling", "type-checking"]
PRESENT_VALIDATIONS = ["basic-structure"]

SUGGESTIONS = [
    "Consider adding input validation with Zod",
    "Add proper error handling with try-catch",
    "Extract business logic to separate functions",
]


def complexity_level(score: int) -> Level:
    if score < 3:
        return Level.LOW
    if score < 6:
        return Level.MEDIUM
    if score < 9:
        return Level.HIGH
    return Level.CRITICAL


def find_issues(code: str) -> list:
    issues = []

    if "await" in code and "try" not in code:
        issues.append("Missing try-catch for async operations")

    if not any(token in code for token in VALIDATION_TOKENS):
        issues.append("No input validation detected")

    if "console.log" in code:
        issues.append("Console.log found in production code")

    return issues


def analyze_controller(code: str) -> AnalysisReport:
    """
    Raises:
        InputError: the snippet fails the syntax check
    """
    require_valid_syntax(code)
    logger.debug(f"Analyzing controller code ({len(code)} chars)")

    line_count = len(code.split("\n"))
    score = min(line_count // 10, 10)

    return AnalysisReport(
        complexity=Complexity(
            score=score,
            level=complexity_level(score),
            issues=find_issues(code),
        ),
        validations=Validations(
            missing=list(MISSING_VALIDATIONS),
            present=list(PRESENT_VALIDATIONS),
        ),
        suggestions=list(SUGGESTIONS),
    )
