"""Runtime validators generated from a stored form definition.

``build_validator`` turns a FormConfig into a FormValidator: one FieldChecker
per field, assembled from the rule builder registered for the field's type.
``validate_submission`` runs visibility first and then validates only the
fields the submitter could see.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from types import MappingProxyType
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from apmform.models.forms import FieldType, FormConfig, FormField, ValidationResult
from apmform.services.conditions import is_empty, visible_field_ids

logger = logging.getLogger(__name__)

FORM_ERROR_KEY = "_form"
FORM_ERROR_MESSAGE = "Terjadi kesalahan validasi"

PHONE_PATTERN = re.compile(r"^[0-9+]+$")
PHONE_MIN_LENGTH = 10
PHONE_MAX_LENGTH = 15

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(AnyUrl)

# A rule returns an error message, or None when the value passes.
Rule = Callable[[Any], str | None]


@dataclass(frozen=True)
class FieldChecker:
    field_id: str
    required: bool
    required_message: str
    rules: tuple[Rule, ...] = ()

    def check(self, values: Mapping[str, Any]) -> str | None:
        value = values.get(self.field_id)
        if is_empty(value):
            return self.required_message if self.required else None
        for rule in self.rules:
            error = rule(value)
            if error is not None:
                return error
        return None


class FormValidator:
    """Checks a whole value mapping; holds nothing but its field checkers."""

    def __init__(self, checkers: Iterable[FieldChecker]):
        self._checkers = tuple(checkers)

    @property
    def field_ids(self) -> list[str]:
        return [c.field_id for c in self._checkers]

    def validate(self, values: Mapping[str, Any]) -> dict[str, str]:
        """Map each failing field id to its first error. Empty means valid."""
        errors = {}
        for checker in self._checkers:
            error = checker.check(values)
            if error is not None:
                errors[checker.field_id] = error
        return errors


# --- Rule factories ---

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string_type(field: FormField) -> Rule:
    def rule(value):
        if not isinstance(value, str):
            return f"{field.label} harus berupa teks"
        return None
    return rule


def _string_constraints(field: FormField) -> list[Rule]:
    """minLength, maxLength and pattern from the field's validation bag."""
    validation = field.validation
    if validation is None:
        return []
    rules = []
    if validation.min_length:
        min_length = validation.min_length
        rules.append(lambda v: f"{field.label} minimal {min_length} karakter" if len(v) < min_length else None)
    if validation.max_length:
        max_length = validation.max_length
        rules.append(lambda v: f"{field.label} maksimal {max_length} karakter" if len(v) > max_length else None)
    if validation.pattern:
        try:
            regex = re.compile(validation.pattern)
        except re.error as e:
            logger.warning("Ignoring invalid pattern %r on field %s: %s", validation.pattern, field.id, e)
        else:
            message = validation.pattern_message or f"Format {field.label} tidak valid"
            rules.append(lambda v: None if regex.search(v) else message)
    return rules


def _adapter_rule(adapter: TypeAdapter, message: str) -> Rule:
    def rule(value):
        try:
            adapter.validate_python(value)
        except PydanticValidationError:
            return message
        return None
    return rule


def _iso_rule(field: FormField, parsers: tuple[Callable[[str], Any], ...]) -> Rule:
    message = f"Format {field.label} tidak valid"

    def rule(value):
        if not isinstance(value, str):
            return message
        for parse in parsers:
            try:
                parse(value)
                return None
            except ValueError:
                continue
        return message
    return rule


def _option_set(field: FormField) -> frozenset[str] | None:
    values = field.option_values
    return frozenset(values) if values else None


# --- Builders, one per field type ---

def _text_rules(field: FormField) -> list[Rule]:
    return [_string_type(field), *_string_constraints(field)]


def _email_rules(field: FormField) -> list[Rule]:
    return [
        _string_type(field),
        _adapter_rule(_email_adapter, "Format email tidak valid"),
        *_string_constraints(field),
    ]


def _url_rules(field: FormField) -> list[Rule]:
    return [
        _string_type(field),
        _adapter_rule(_url_adapter, "Format URL tidak valid"),
        *_string_constraints(field),
    ]


def _phone_rules(field: FormField) -> list[Rule]:
    def phone(value):
        if len(value) < PHONE_MIN_LENGTH:
            return f"{field.label} minimal {PHONE_MIN_LENGTH} digit"
        if len(value) > PHONE_MAX_LENGTH:
            return f"{field.label} maksimal {PHONE_MAX_LENGTH} digit"
        if not PHONE_PATTERN.match(value):
            return f"{field.label} tidak valid"
        return None
    return [_string_type(field), phone, *_string_constraints(field)]


def _number_rules(field: FormField) -> list[Rule]:
    def number(value):
        if not _is_number(value):
            return f"{field.label} harus berupa angka"
        validation = field.validation
        if validation is not None:
            if validation.min is not None and value < validation.min:
                return f"{field.label} minimal {validation.min}"
            if validation.max is not None and value > validation.max:
                return f"{field.label} maksimal {validation.max}"
        return None
    return [number]


def _single_choice_rules(field: FormField) -> list[Rule]:
    allowed = _option_set(field)
    message = f"Pilihan {field.label} tidak valid"

    def choice(value):
        if not isinstance(value, str):
            return message
        # No declared options: any string is accepted.
        if allowed is not None and value not in allowed:
            return message
        return None
    return [choice]


def _multi_choice_rules(field: FormField) -> list[Rule]:
    allowed = _option_set(field)
    message = f"Pilihan {field.label} tidak valid"
    validation = field.validation

    def choices(value):
        if isinstance(value, bool) and field.type == FieldType.CHECKBOX and allowed is None:
            # Single consent checkbox without options; a required one must be ticked.
            if field.required and not value:
                return required_message(field)
            return None
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            return message
        if allowed is not None and any(v not in allowed for v in value):
            return message
        if validation is not None:
            if validation.min and len(value) < validation.min:
                return f"Pilih minimal {validation.min} opsi"
            if validation.max is not None and len(value) > validation.max:
                return f"Pilih maksimal {validation.max} opsi"
        return None
    return [choices]


def _date_rules(field: FormField) -> list[Rule]:
    return [_iso_rule(field, (date.fromisoformat, datetime.fromisoformat))]


def _time_rules(field: FormField) -> list[Rule]:
    return [_iso_rule(field, (time.fromisoformat,))]


def _datetime_rules(field: FormField) -> list[Rule]:
    return [_iso_rule(field, (datetime.fromisoformat,))]


def _no_rules(field: FormField) -> list[Rule]:
    return []


FIELD_RULE_BUILDERS: Mapping[str, Callable[[FormField], list[Rule]]] = MappingProxyType({
    FieldType.TEXT.value: _text_rules,
    FieldType.TEXTAREA.value: _text_rules,
    FieldType.NIM.value: _text_rules,
    FieldType.PRODI.value: _text_rules,
    FieldType.EMAIL.value: _email_rules,
    FieldType.URL.value: _url_rules,
    FieldType.PHONE.value: _phone_rules,
    FieldType.NUMBER.value: _number_rules,
    FieldType.SELECT.value: _single_choice_rules,
    FieldType.RADIO.value: _single_choice_rules,
    FieldType.FAKULTAS.value: _single_choice_rules,
    FieldType.CHECKBOX.value: _multi_choice_rules,
    FieldType.MULTISELECT.value: _multi_choice_rules,
    FieldType.DATE.value: _date_rules,
    FieldType.TIME.value: _time_rules,
    FieldType.DATETIME.value: _datetime_rules,
    # File contents are checked at the upload boundary (services.uploads).
    FieldType.FILE.value: _no_rules,
})


def required_message(field: FormField) -> str:
    if field.validation is not None and field.validation.required_message:
        return field.validation.required_message
    return f"{field.label} wajib diisi"


def build_field_checker(field: FormField) -> FieldChecker:
    builder = FIELD_RULE_BUILDERS.get(field.type, _no_rules)
    try:
        rules = tuple(builder(field))
    except Exception:
        # A broken field definition must not block the rest of the form.
        logger.warning("Falling back to permissive checker for field %s", field.id, exc_info=True)
        rules = ()
    return FieldChecker(
        field_id=field.id,
        required=field.required,
        required_message=required_message(field),
        rules=rules,
    )


def build_validator(form: FormConfig, visible_field_ids: set[str] | None = None) -> FormValidator:
    """Build a validator for ``form``.

    ``hidden`` fields are skipped, as is any field outside ``visible_field_ids``
    when that set is given.
    """
    checkers = []
    for field in form.sorted_fields():
        if visible_field_ids is not None and field.id not in visible_field_ids:
            continue
        if field.type == FieldType.HIDDEN:
            continue
        checkers.append(build_field_checker(field))
    return FormValidator(checkers)


def _accepted_data(form: FormConfig, values: Mapping[str, Any], field_ids: set[str] | None) -> dict[str, Any]:
    data = {}
    for field in form.sorted_fields():
        if field_ids is not None and field.id not in field_ids:
            continue
        if field.id in values:
            data[field.id] = values[field.id]
    return data


def validate_form_data(
    form: FormConfig,
    values: Mapping[str, Any],
    visible_field_ids: set[str] | None = None,
) -> ValidationResult:
    """Validate ``values`` against ``form`` and never raise.

    On success ``data`` holds the input restricted to the form's fields (and to
    ``visible_field_ids`` when given). Any internal fault is reported as a
    single error under ``_form``.
    """
    try:
        validator = build_validator(form, visible_field_ids)
        errors = validator.validate(values)
        if errors:
            return ValidationResult(success=False, errors=errors)
        return ValidationResult(success=True, data=_accepted_data(form, values, visible_field_ids))
    except Exception:
        logger.exception("Validation error")
        return ValidationResult(success=False, errors={FORM_ERROR_KEY: FORM_ERROR_MESSAGE})


def validate_submission(form: FormConfig, values: Mapping[str, Any]) -> ValidationResult:
    """Validate a submission against only the fields currently visible.

    A field hidden by its condition can never block submission, and its value
    is dropped from the accepted payload.
    """
    try:
        visible = visible_field_ids(form, values)
    except Exception:
        logger.exception("Visibility evaluation error")
        return ValidationResult(success=False, errors={FORM_ERROR_KEY: FORM_ERROR_MESSAGE})
    return validate_form_data(form, values, visible)
