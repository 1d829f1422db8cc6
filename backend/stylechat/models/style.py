"""Conversation and edit result models for the style editor."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

# A JSON-like map style document (MapLibre style spec shape)
StyleDocument = dict[str, Any]

# One RFC 6902 operation as emitted by the model: {"op", "path", "value"?, "from"?}
PatchOperation = dict[str, Any]


class ConversationTurn(BaseModel):
    """A single chat message exchanged with the style assistant."""

    role: Literal["user", "assistant"]
    content: str


class EditSuccess(BaseModel):
    ok: Literal[True] = True
    style: StyleDocument
    explanation: str | None = None


class EditFailure(BaseModel):
    ok: Literal[False] = False
    error: str


EditResult = Union[EditSuccess, EditFailure]


class ValidationIssue(BaseModel):
    """One problem reported by a style validator."""

    message: str
    path: str = Field(default="", description="Dotted location of the problem, if known")
