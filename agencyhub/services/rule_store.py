"""Rule store: authoritative collection of automation rules."""

import logging
import uuid
from datetime import datetime
from typing import Protocol

from agencyhub.core.config import Constants
from agencyhub.domain.automation import (
    AddTagAction,
    AssignUserAction,
    AutomationRule,
    Condition,
    ConditionField,
    ConditionOperator,
    SendNotificationAction,
    Trigger,
    TriggerType,
)
from agencyhub.domain.create_models import RuleCreate
from agencyhub.domain.notification import NotificationType
from agencyhub.domain.update_models import RuleUpdate


logger = logging.getLogger(__name__)


class RuleRepository(Protocol):
    """Storage interface for automation rules.

    Unknown ids never raise: mutators return False and leave the store unchanged.
    """

    def list_all(self) -> list[AutomationRule]: ...

    def get(self, rule_id: str) -> AutomationRule | None: ...

    def add(self, data: RuleCreate, *, created_at: datetime) -> AutomationRule: ...

    def update(self, rule_id: str, patch: RuleUpdate) -> bool: ...

    def remove(self, rule_id: str) -> bool: ...

    def toggle_active(self, rule_id: str) -> bool: ...

    def active_rules_for(self, trigger_type: TriggerType) -> list[AutomationRule]: ...

    def record_trigger(self, rule_id: str, *, triggered_at: datetime) -> None: ...


class InMemoryRuleStore:
    """Process-local rule store. Rules do not survive a restart."""

    def __init__(self, rules: list[AutomationRule] | None = None) -> None:
        self._rules: list[AutomationRule] = list(rules or [])

    def __len__(self) -> int:
        return len(self._rules)

    def _index_of(self, rule_id: str) -> int | None:
        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                return index
        return None

    def list_all(self) -> list[AutomationRule]:
        """Return copies of all rules in insertion order."""
        return [rule.model_copy(deep=True) for rule in self._rules]

    def get(self, rule_id: str) -> AutomationRule | None:
        index = self._index_of(rule_id)
        return None if index is None else self._rules[index].model_copy(deep=True)

    def add(self, data: RuleCreate, *, created_at: datetime) -> AutomationRule:
        """Store a new rule with a fresh id and a zeroed trigger counter."""
        rule = AutomationRule(
            id=f"{Constants.RULE_ID_PREFIX}-{uuid.uuid4().hex[:12]}",
            created_at=created_at,
            trigger_count=0,
            **data.model_dump(),
        )
        self._rules.append(rule)
        logger.info("Added automation rule %s (%s)", rule.id, rule.name)
        return rule.model_copy(deep=True)

    def update(self, rule_id: str, patch: RuleUpdate) -> bool:
        """Merge explicitly set fields of ``patch`` into the rule."""
        index = self._index_of(rule_id)
        if index is None:
            logger.debug("Update skipped: rule %s not found", rule_id)
            return False

        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        merged = {**self._rules[index].model_dump(), **changes}
        self._rules[index] = AutomationRule.model_validate(merged)
        logger.info("Updated automation rule %s fields=%s", rule_id, sorted(changes))
        return True

    def remove(self, rule_id: str) -> bool:
        index = self._index_of(rule_id)
        if index is None:
            logger.debug("Delete skipped: rule %s not found", rule_id)
            return False

        del self._rules[index]
        logger.info("Deleted automation rule %s", rule_id)
        return True

    def toggle_active(self, rule_id: str) -> bool:
        index = self._index_of(rule_id)
        if index is None:
            logger.debug("Toggle skipped: rule %s not found", rule_id)
            return False

        rule = self._rules[index]
        rule.is_active = not rule.is_active
        logger.info("Automation rule %s is now %s", rule_id, "active" if rule.is_active else "inactive")
        return True

    def active_rules_for(self, trigger_type: TriggerType) -> list[AutomationRule]:
        """Return the live active rules for a trigger type, in store order."""
        return [rule for rule in self._rules if rule.is_active and rule.trigger.type == trigger_type]

    def record_trigger(self, rule_id: str, *, triggered_at: datetime) -> None:
        """Bump the trigger counter once per rule match."""
        index = self._index_of(rule_id)
        if index is None:
            # Rule was removed while its actions were running
            return
        rule = self._rules[index]
        rule.trigger_count += 1
        rule.last_triggered = triggered_at


def default_rules(*, created_at: datetime) -> list[AutomationRule]:
    """Return the built-in rules seeded on startup."""
    return [
        AutomationRule(
            id="auto-due-date-24h",
            name="Notificar Prazo Próximo (24h)",
            description="Envia notificação quando uma tarefa está próxima do prazo (24 horas)",
            trigger=Trigger(
                type=TriggerType.DUE_DATE_APPROACHING,
                conditions=[
                    Condition(field=ConditionField.DUE_DATE, operator=ConditionOperator.LESS_THAN, value="24"),
                ],
            ),
            actions=[
                SendNotificationAction(
                    title="Prazo Próximo",
                    message='A tarefa "{{taskTitle}}" vence em menos de 24 horas',
                    severity=NotificationType.WARNING,
                ),
            ],
            created_at=created_at,
        ),
        AutomationRule(
            id="auto-urgent-assign",
            name="Auto-atribuir Tarefas Urgentes",
            description="Atribui automaticamente tarefas urgentes ao gerente do projeto",
            trigger=Trigger(
                type=TriggerType.TASK_CREATED,
                conditions=[
                    Condition(field=ConditionField.PRIORITY, operator=ConditionOperator.EQUALS, value="urgent"),
                ],
            ),
            actions=[
                AssignUserAction(role="manager"),
                SendNotificationAction(
                    title="Tarefa Urgente Atribuída",
                    message='Nova tarefa urgente "{{taskTitle}}" foi atribuída automaticamente',
                    severity=NotificationType.AUTOMATION,
                ),
            ],
            created_at=created_at,
        ),
        AutomationRule(
            id="auto-overdue-warning",
            name="Alerta de Tarefa Atrasada",
            description="Envia alerta quando uma tarefa está atrasada",
            trigger=Trigger(
                type=TriggerType.DUE_DATE_APPROACHING,
                conditions=[
                    Condition(field=ConditionField.DUE_DATE, operator=ConditionOperator.LESS_THAN, value="0"),
                ],
            ),
            actions=[
                SendNotificationAction(
                    title="Tarefa Atrasada",
                    message='A tarefa "{{taskTitle}}" está atrasada',
                    severity=NotificationType.WARNING,
                ),
                AddTagAction(tag="atrasada"),
            ],
            created_at=created_at,
        ),
    ]
