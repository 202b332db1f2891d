from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from helpdesk.core.constants import (
    COMMENT_MAX_LENGTH,
    COMMENT_MIN_LENGTH,
    MAX_IMAGES_PER_COMMENT,
)

_FALSY_FLAGS = {"", "0", "false", "off", "no"}


class CommentForm(BaseModel):
    """Non-file fields of a comment submission."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., min_length=COMMENT_MIN_LENGTH, max_length=COMMENT_MAX_LENGTH)
    ticket_number: str = Field(..., alias="ticketNumber", min_length=1, max_length=20)
    private: bool = False
    images: int = Field(0, ge=0, le=MAX_IMAGES_PER_COMMENT)
    csrf_token: str | None = None

    @field_validator("private", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in _FALSY_FLAGS
        return bool(value)
