"""
errors.py
=========
Exception hierarchy shared by the analyzers, the model wrapper and the API.

Only InputError and AnalyzerFault ever reach a client. The model-side
errors are caught inside the LLM service and turned into a fallback.
"""


class CopilotError(Exception):
    status_code = 500


class InputError(CopilotError):
    """Empty or malformed code supplied by the caller."""
    status_code = 400


class UpstreamUnavailable(CopilotError):
    """Model disabled, unreachable, or returned nothing."""
    status_code = 503


class ModelOutputError(CopilotError):
    pass


class ParseError(ModelOutputError):
    """Model output is not valid JSON."""
    pass


class SchemaViolationError(ModelOutputError):
    """Model output is JSON but does not match the expected shape."""
    pass


class AnalyzerFault(CopilotError):
    """Unexpected exception inside a rule-based analyzer."""
    status_code = 500
