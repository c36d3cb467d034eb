"""Competition and expo registrations: fixed core fields plus the event's custom form."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from apmform.models.forms import (
    FieldType,
    FieldValidation,
    FormConfig,
    FormField,
    FormSubmission,
    SubmissionMetadata,
    ValidationResult,
)
from apmform.services.templates import NIM_VALIDATION
from apmform.services.validation import validate_submission

BASE_REGISTRATION_FIELDS = [
    FormField(id="nama", type=FieldType.TEXT.value, label="Nama", required=True,
              validation=FieldValidation(min_length=2), order=-6),
    FormField(id="nim", type=FieldType.NIM.value, label="NIM", required=True,
              validation=FieldValidation.model_validate(NIM_VALIDATION), order=-5),
    FormField(id="email", type=FieldType.EMAIL.value, label="Email", required=True, order=-4),
    FormField(id="whatsapp", type=FieldType.PHONE.value, label="Nomor WhatsApp", required=True, order=-3),
    FormField(id="fakultas", type=FieldType.FAKULTAS.value, label="Fakultas", required=True, order=-2),
    FormField(id="prodi", type=FieldType.PRODI.value, label="Program Studi", required=True, order=-1),
]

BASE_FIELD_IDS = frozenset(f.id for f in BASE_REGISTRATION_FIELDS)


def merge_with_base_fields(form: FormConfig | None) -> FormConfig:
    """Prepend the core registration fields; a custom field with the same id wins."""
    if form is None:
        return FormConfig(fields=list(BASE_REGISTRATION_FIELDS))
    custom_ids = {f.id for f in form.fields}
    base = [f for f in BASE_REGISTRATION_FIELDS if f.id not in custom_ids]
    return form.model_copy(update={"fields": base + list(form.fields)})


def validate_registration(form: FormConfig | None, body: Mapping[str, Any]) -> ValidationResult:
    return validate_submission(merge_with_base_fields(form), body)


def build_submission(
    data: Mapping[str, Any],
    form: FormConfig | None = None,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> FormSubmission:
    return FormSubmission(
        data=dict(data),
        metadata=SubmissionMetadata(
            submitted_at=datetime.now(timezone.utc).isoformat(),
            user_agent=user_agent,
            ip_address=ip_address,
            form_version=form.version if form is not None else None,
        ),
    )
