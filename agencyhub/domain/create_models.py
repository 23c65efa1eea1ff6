"""Pydantic models for creating automation records."""

from pydantic import BaseModel, Field, field_validator

from agencyhub.domain.automation import Action, Trigger


def require_not_blank(v: str) -> str:
    """Strip ``v``, rejecting values that are empty or whitespace only."""
    if not v.strip():
        msg = "Name and description are required"
        raise ValueError(msg)
    return v.strip()


class RuleCreate(BaseModel):
    """Pydantic model for creating an automation rule.

    Identity, creation timestamp and trigger counters are assigned by the store.
    """

    name: str = Field(..., description="Human-readable rule name")
    description: str = Field(..., description="What the rule does")
    trigger: Trigger
    actions: list[Action] = Field(default_factory=list)
    is_active: bool = Field(default=True)

    @field_validator("name", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate that name and description are not blank."""
        return require_not_blank(v)
