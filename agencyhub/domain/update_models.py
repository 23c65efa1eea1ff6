"""Update models for automation records."""

from pydantic import BaseModel, field_validator

from agencyhub.domain.automation import Action, Trigger
from agencyhub.domain.create_models import require_not_blank


class RuleUpdate(BaseModel):
    """Partial update for an automation rule; only explicitly set fields are merged."""

    name: str | None = None
    description: str | None = None
    trigger: Trigger | None = None
    actions: list[Action] | None = None
    is_active: bool | None = None

    @field_validator("name", "description")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        """Validate that a provided name or description is not blank."""
        return None if v is None else require_not_blank(v)
