"""Failure taxonomy for a style edit.

Every error carries the human-readable message that ends up in
``EditFailure.error``; the orchestrator is the only place that converts them.
"""

from __future__ import annotations


class StyleEditError(Exception):
    """Base class for all terminal edit failures."""


class EmptyPrompt(StyleEditError):
    def __init__(self) -> None:
        super().__init__("Prompt is empty.")


class InvalidHistory(StyleEditError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid conversation history: {detail}")


class CredentialMissing(StyleEditError):
    def __init__(self) -> None:
        super().__init__("Missing API key. Set ANTHROPIC_API_KEY or use the development proxy.")


class NetworkFailure(StyleEditError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Network error: {detail}")


class HttpError(StyleEditError):
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body[:200]
        super().__init__(f"API error {status}: {self.body}")


class MalformedEnvelope(StyleEditError):
    def __init__(self) -> None:
        super().__init__("Invalid JSON response from API")


class EmptyResponse(StyleEditError):
    def __init__(self) -> None:
        super().__init__("Empty or invalid response from API")


class UnparsableModelOutput(StyleEditError):
    def __init__(self, message: str = "Model did not return valid JSON. Try rephrasing your request.") -> None:
        super().__init__(message)


class NestedEnvelopeUnresolvable(StyleEditError):
    pass


class PatchApplicationFailure(StyleEditError):
    """No strategy of the apply ladder produced a document."""

    def __init__(self, detail: str, *, unresolvable: bool = False) -> None:
        self.detail = detail
        self.unresolvable = unresolvable
        super().__init__(f"Patch failed: {detail}")


class PostConditionInvalid(StyleEditError):
    def __init__(self, message: str, *, prefix: str = "Style invalid after patch") -> None:
        self.validator_message = message
        super().__init__(f"{prefix}: {message}")
