"""Condition evaluation for automation rules.

Every function here is pure: the caller passes the current time in, so
rules can be evaluated against a controlled clock.

Field resolution:
    priority, status, responsible -> the task attribute as-is
    tags                          -> tags joined with ","
    dueDate                       -> signed whole hours until the task is due
                                     (negative when overdue)

Because dueDate resolves to hours, ``less_than 24`` reads as "due within a
day" and ``less_than 0`` as "already overdue".
"""

import logging
import math
import re
from collections.abc import Sequence
from datetime import datetime

from agencyhub.core.config import Constants
from agencyhub.domain.automation import Condition, ConditionField, ConditionOperator
from agencyhub.domain.task import Task


logger = logging.getLogger(__name__)

# Sentinel for "field has no value for this task" (e.g. no due date)
_MISSING = object()

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INFINITY_PATTERN = re.compile(r"([+-]?)Infinity")
_RADIX_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def hours_until_due(*, task: Task, now: datetime) -> int | None:
    """Return whole hours between ``now`` and the task deadline, truncated toward zero.

    The deadline is ``due_date`` at ``due_time`` (end of day when no time is set).
    Naive deadlines are interpreted in the timezone of ``now``.

    Returns:
        Signed hour count, or None when the task has no (parseable) due date
    """
    if not task.due_date:
        return None

    due_time = task.due_time or Constants.DEFAULT_DUE_TIME
    try:
        due_at = datetime.fromisoformat(f"{task.due_date}T{due_time}")
    except ValueError:
        logger.debug("Unparseable due date on task %s: %r %r", task.id, task.due_date, task.due_time)
        return None

    if due_at.tzinfo is None:
        due_at = due_at.replace(tzinfo=now.tzinfo)

    # Compare instants; same-zone subtraction ignores DST offset changes
    return math.trunc((due_at.timestamp() - now.timestamp()) / 3600)


def resolve_field_value(*, field: str, task: Task, now: datetime) -> object:
    """Resolve a condition field against a task.

    Returns:
        The left-hand comparison value, or ``_MISSING`` when the field is
        unknown or the task has no due date
    """
    match field:
        case ConditionField.PRIORITY:
            return str(task.priority)
        case ConditionField.STATUS:
            return str(task.status)
        case ConditionField.RESPONSIBLE:
            return task.responsible
        case ConditionField.TAGS:
            return ",".join(task.tags)
        case ConditionField.DUE_DATE:
            hours = hours_until_due(task=task, now=now)
            return _MISSING if hours is None else hours
        case _:
            logger.debug("Unknown condition field %r", field)
            return _MISSING


def _to_number(value: object) -> float:
    """Coerce a value to a number the way JavaScript's ``Number()`` does.

    Blank strings become 0, ``0x``/``0o``/``0b`` literals and ``Infinity``
    are accepted, and anything else non-numeric (including Python-only
    spellings such as ``1_000`` or ``inf``) becomes NaN.
    """
    if value is None:
        return math.nan
    if isinstance(value, int | float):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    if _DECIMAL_PATTERN.fullmatch(text):
        return float(text)
    if infinity := _INFINITY_PATTERN.fullmatch(text):
        return -math.inf if infinity.group(1) == "-" else math.inf
    if _RADIX_PATTERN.fullmatch(text):
        return float(int(text, 0))
    return math.nan


def _to_text(value: object) -> str:
    return "" if value is None else str(value)


def evaluate_condition(*, condition: Condition, task: Task, now: datetime) -> bool:
    """Evaluate a single condition. Unknown fields and operators never match."""
    field_value = resolve_field_value(field=condition.field, task=task, now=now)
    if field_value is _MISSING:
        return False

    match condition.operator:
        case ConditionOperator.EQUALS:
            return field_value == condition.value
        case ConditionOperator.NOT_EQUALS:
            return field_value != condition.value
        case ConditionOperator.CONTAINS:
            return condition.value in _to_text(field_value)
        case ConditionOperator.GREATER_THAN:
            return _to_number(field_value) > _to_number(condition.value)
        case ConditionOperator.LESS_THAN:
            return _to_number(field_value) < _to_number(condition.value)
        case _:
            logger.debug("Unknown condition operator %r", condition.operator)
            return False


def evaluate_conditions(*, conditions: Sequence[Condition], task: Task, now: datetime) -> bool:
    """Return True when every condition holds. An empty list always matches."""
    return all(evaluate_condition(condition=condition, task=task, now=now) for condition in conditions)
