"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from stylechat.models.style import ConversationTurn


class EditStyleRequest(BaseModel):
    style: dict[str, Any] = Field(..., description="Current MapLibre style document")
    prompt: str = Field(..., description="Requested change in natural language")
    history: list[ConversationTurn] = Field(
        default_factory=list,
        description="Chat history (role/content pairs); only the last 6 turns are used",
    )
