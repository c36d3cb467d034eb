"""Conditional show/hide logic for dynamic form fields.

Every function here is a pure read of the form definition and the current
value mapping. Visibility must be recomputed whenever the values change,
because a later field may depend on an earlier field's current value.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from apmform.models.forms import ConditionalDisplay, ConditionOperator, FieldCondition, FormConfig, FormField

_MISSING = object()


def is_empty(value: Any) -> bool:
    """Empty means absent, None, "" or an empty list. 0, "0" and False are values."""
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, list):
        return len(value) == 0
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(left: Any, right: Any) -> bool:
    if left is _MISSING:
        left = None
    # True == 1 in Python; a boolean answer never matches a numeric one here.
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _contains(field_value: Any, expected: Any) -> bool | None:
    """Substring or membership test; None when the operands do not apply."""
    if isinstance(field_value, str) and isinstance(expected, str):
        return expected.lower() in field_value.lower()
    if isinstance(field_value, list) and isinstance(expected, str):
        return expected in field_value
    return None


def _op_equals(field_value: Any, expected: Any) -> bool:
    return _strict_equals(field_value, expected)


def _op_not_equals(field_value: Any, expected: Any) -> bool:
    return not _strict_equals(field_value, expected)


def _op_contains(field_value: Any, expected: Any) -> bool:
    result = _contains(field_value, expected)
    return False if result is None else result


def _op_not_contains(field_value: Any, expected: Any) -> bool:
    result = _contains(field_value, expected)
    return True if result is None else not result


def _op_starts_with(field_value: Any, expected: Any) -> bool:
    if isinstance(field_value, str) and isinstance(expected, str):
        return field_value.lower().startswith(expected.lower())
    return False


def _op_ends_with(field_value: Any, expected: Any) -> bool:
    if isinstance(field_value, str) and isinstance(expected, str):
        return field_value.lower().endswith(expected.lower())
    return False


def _op_greater_than(field_value: Any, expected: Any) -> bool:
    return _is_number(field_value) and _is_number(expected) and field_value > expected


def _op_less_than(field_value: Any, expected: Any) -> bool:
    return _is_number(field_value) and _is_number(expected) and field_value < expected


def _op_is_empty(field_value: Any, expected: Any) -> bool:
    return is_empty(field_value)


def _op_is_not_empty(field_value: Any, expected: Any) -> bool:
    return not is_empty(field_value)


def _op_in(field_value: Any, expected: Any) -> bool:
    if isinstance(expected, list):
        return any(_strict_equals(field_value, item) for item in expected)
    return False


def _op_not_in(field_value: Any, expected: Any) -> bool:
    if isinstance(expected, list):
        return not any(_strict_equals(field_value, item) for item in expected)
    return True


OPERATORS: Mapping[str, Callable[[Any, Any], bool]] = MappingProxyType({
    ConditionOperator.EQUALS.value: _op_equals,
    ConditionOperator.NOT_EQUALS.value: _op_not_equals,
    ConditionOperator.CONTAINS.value: _op_contains,
    ConditionOperator.NOT_CONTAINS.value: _op_not_contains,
    ConditionOperator.STARTS_WITH.value: _op_starts_with,
    ConditionOperator.ENDS_WITH.value: _op_ends_with,
    ConditionOperator.GREATER_THAN.value: _op_greater_than,
    ConditionOperator.LESS_THAN.value: _op_less_than,
    ConditionOperator.IS_EMPTY.value: _op_is_empty,
    ConditionOperator.IS_NOT_EMPTY.value: _op_is_not_empty,
    ConditionOperator.IN.value: _op_in,
    ConditionOperator.NOT_IN.value: _op_not_in,
})


def evaluate_condition(condition: FieldCondition, values: Mapping[str, Any]) -> bool:
    """Apply one condition to the current value of the field it references.

    An operator outside the known set counts as satisfied, so an unrecognised
    rule never hides a field.
    """
    op = OPERATORS.get(condition.operator)
    if op is None:
        return True
    return op(values.get(condition.field, _MISSING), condition.value)


def evaluate_display(display: ConditionalDisplay, values: Mapping[str, Any]) -> bool:
    """Whether a field carrying this display rule is visible.

    With no conditions the static ``show`` flag decides. Otherwise the
    conditions are combined with AND/OR; ``show=False`` inverts the result.
    """
    if not display.conditions:
        return display.show

    results = [evaluate_condition(c, values) for c in display.conditions]
    met = all(results) if display.logic == "and" else any(results)
    return met if display.show else not met


def is_field_visible(field: FormField, values: Mapping[str, Any]) -> bool:
    if field.condition is None:
        return True
    return evaluate_display(field.condition, values)


def visible_fields(form: FormConfig, values: Mapping[str, Any]) -> list[FormField]:
    """Fields currently visible for ``values``, in display order.

    Values of hidden fields are left untouched and still take part in other
    fields' conditions; dropping them is up to the caller.
    """
    return [f for f in form.sorted_fields() if is_field_visible(f, values)]


def visible_field_ids(form: FormConfig, values: Mapping[str, Any]) -> set[str]:
    return {f.id for f in visible_fields(form, values)}
