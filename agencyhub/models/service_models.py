"""Pydantic models for service layer return types."""

from pydantic import BaseModel, Field

from agencyhub.domain.automation import ActionType, TriggerType


class DispatchResult(BaseModel):
    """Outcome of routing one trigger to the active rules of that type."""

    trigger_type: TriggerType
    task_id: str
    evaluated_rule_ids: list[str] = Field(default_factory=list)
    matched_rule_ids: list[str] = Field(default_factory=list)
    failed_rule_ids: list[str] = Field(default_factory=list)


class ActionOutcome(BaseModel):
    """Result of running a single action of a matched rule."""

    rule_id: str
    action_type: ActionType
    success: bool
    error_code: str | None = None


class DueDateCheckResult(BaseModel):
    """Summary of one due-date tick."""

    tasks_checked: int
    rules_matched: int
