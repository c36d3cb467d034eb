from collections.abc import Mapping
from typing import Any

from apmform.exceptions import FormDefinitionError, FormNotFoundError
from apmform.models.forms import (
    FileCheckResponse,
    FileHandle,
    FormConfig,
    FormSubmission,
    SaveFormResponse,
    ValidationResult,
    VisibleFieldsResponse,
)
from apmform.services import registration, uploads
from apmform.services.conditions import visible_fields
from apmform.services.store import get_form_store
from apmform.services.templates import (
    create_empty_form_config,
    create_field_from_template,
    get_template,
    lint_form_config,
)
from apmform.services.validation import validate_submission


def list_forms() -> list[str]:
    return get_form_store().list_ids()


def get_form(form_id: str) -> FormConfig:
    return get_form_store().get(form_id)


def save_form(form_id: str, form: FormConfig) -> SaveFormResponse:
    """Store a form definition. Problems an author should fix come back as warnings."""
    get_form_store().save(form_id, form)
    return SaveFormResponse(form_id=form_id, form=form, warnings=lint_form_config(form))


def create_form(form_id: str) -> SaveFormResponse:
    """Start a new form with default settings and no fields."""
    store = get_form_store()
    if store.exists(form_id):
        raise FormDefinitionError(f"Form '{form_id}' already exists")
    return save_form(form_id, create_empty_form_config())


def add_field(form_id: str, field_type: str) -> SaveFormResponse:
    """Append a field built from the palette template for ``field_type``."""
    template = get_template(field_type)
    if template is None:
        raise FormDefinitionError(f"No field template for type '{field_type}'")
    form = get_form(form_id)
    order = max((f.order for f in form.fields), default=-1) + 1
    field = create_field_from_template(template, order)
    return save_form(form_id, form.model_copy(update={"fields": [*form.fields, field]}))


def delete_form(form_id: str) -> None:
    get_form_store().delete(form_id)


def get_visible_fields(form_id: str, values: Mapping[str, Any]) -> VisibleFieldsResponse:
    form = get_form(form_id)
    return VisibleFieldsResponse(
        form_id=form_id,
        visible_field_ids=[f.id for f in visible_fields(form, values)],
    )


def validate(form_id: str, values: Mapping[str, Any]) -> ValidationResult:
    return validate_submission(get_form(form_id), values)


def register(
    form_id: str,
    values: Mapping[str, Any],
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[ValidationResult, FormSubmission | None]:
    """Validate core and custom registration fields; build the submission on success."""
    form = get_form(form_id)
    result = registration.validate_registration(form, values)
    if not result.success:
        return result, None
    submission = registration.build_submission(result.data, form, user_agent=user_agent, ip_address=ip_address)
    return result, submission


def check_upload(form_id: str, field_id: str, handle: FileHandle) -> FileCheckResponse:
    field = get_form(form_id).get_field(field_id)
    if field is None:
        raise FormNotFoundError(f"Field '{field_id}' not found in form '{form_id}'")
    error = uploads.check_file(field, handle)
    return FileCheckResponse(field_id=field_id, valid=error is None, error=error)
