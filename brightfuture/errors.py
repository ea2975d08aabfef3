from __future__ import annotations


class AppError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class ConfigError(AppError):
    # Raised when a required setting (e.g. OPENAI_API_KEY) is missing.
    pass


class AnalysisError(AppError):
    # Raised when an analysis could not be obtained. Callers let the user resubmit.
    pass


class CompletionProviderError(AnalysisError):
    # Network or provider failure while calling the completion API.
    pass


class EmptyCompletionError(AnalysisError):
    # The provider answered but the message had no content.
    pass


class MalformedCompletionError(AnalysisError):
    # Content was not a JSON object or did not match the analysis schema.
    pass
