from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models persisted as camelCase JSON by the portal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    NUMBER = "number"
    PHONE = "phone"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    MULTISELECT = "multiselect"
    FILE = "file"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    URL = "url"
    NIM = "nim"  # student ID
    FAKULTAS = "fakultas"  # faculty / department
    PRODI = "prodi"  # study program
    HIDDEN = "hidden"


SELECTION_TYPES = frozenset({
    FieldType.SELECT.value, FieldType.RADIO.value, FieldType.CHECKBOX.value,
    FieldType.MULTISELECT.value, FieldType.FAKULTAS.value,
})


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IN = "in"
    NOT_IN = "not_in"


# Operator names written by the first version of the registration form editor.
LEGACY_OPERATORS = {"empty": "is_empty", "not_empty": "is_not_empty"}


class FieldOption(CamelModel):
    value: str
    label: str
    disabled: bool = False


class FieldValidation(CamelModel):
    min: int | float | None = None
    max: int | float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None
    required: bool | None = None
    required_message: str | None = None
    max_file_size: int | None = None  # bytes
    allowed_file_types: list[str] | None = None  # e.g. ["image/*", "application/pdf", ".docx"]


class FieldCondition(CamelModel):
    field: str
    # Kept as a plain string: operators this version does not know evaluate as satisfied.
    operator: str
    value: bool | int | float | str | list[bool | int | float | str] | None = None

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy_operator(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("operator") in LEGACY_OPERATORS:
            data = {**data, "operator": LEGACY_OPERATORS[data["operator"]]}
        return data


class ConditionalDisplay(CamelModel):
    show: bool = True
    logic: Literal["and", "or"] = "and"
    conditions: list[FieldCondition] = Field(default_factory=list)


class FormField(CamelModel):
    id: str
    # Kept as a plain string: unknown types are validated with no extra constraint.
    type: str
    label: str
    placeholder: str | None = None
    help_text: str | None = None
    default_value: bool | int | float | str | list[str] | None = None
    required: bool = False
    disabled: bool | None = None
    read_only: bool | None = None
    options: list[FieldOption] | None = None
    validation: FieldValidation | None = None
    condition: ConditionalDisplay | None = None
    order: int = 0
    col_span: int | None = None
    class_name: str | None = None
    attributes: dict[str, str] | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_condition(cls, data: Any) -> Any:
        """Older forms stored one bare condition instead of a ConditionalDisplay."""
        if isinstance(data, dict):
            condition = data.get("condition")
            if isinstance(condition, dict) and "field" in condition and "conditions" not in condition:
                data = {**data, "condition": {"show": True, "logic": "and", "conditions": [condition]}}
        return data

    @property
    def option_values(self) -> list[str]:
        return [o.value for o in self.options or []]


class FormSettings(CamelModel):
    submit_button_text: str = "Daftar"
    success_message: str = "Pendaftaran berhasil! Terima kasih telah mendaftar."
    allow_multiple_submissions: bool = False
    redirect_url: str | None = None
    show_confirmation: bool | None = True
    confirmation_message: str | None = "Apakah Anda yakin ingin mengirim formulir ini?"
    enable_captcha: bool | None = None
    submit_handler: str | None = None


class FormConfig(CamelModel):
    fields: list[FormField] = Field(default_factory=list)
    settings: FormSettings = Field(default_factory=FormSettings)
    version: int | None = 1

    def sorted_fields(self) -> list[FormField]:
        """Fields in ascending display order; ties keep their list position."""
        return sorted(self.fields, key=lambda f: f.order)

    def get_field(self, field_id: str) -> FormField | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None


class FileHandle(CamelModel):
    """Reference to a file already stored by the upload endpoint."""

    name: str
    size: int | None = None
    mime_type: str | None = None
    url: str | None = None


SubmissionValue = str | bool | int | float | list[str] | FileHandle | None


class ValidationResult(BaseModel):
    success: bool
    data: dict[str, Any] | None = None
    errors: dict[str, str] | None = None


class SubmissionMetadata(CamelModel):
    submitted_at: str
    user_agent: str | None = None
    ip_address: str | None = None
    form_version: int | None = None


class FormSubmission(CamelModel):
    data: dict[str, Any]
    metadata: SubmissionMetadata


# --- Request / response bodies ---

class SubmissionRequest(BaseModel):
    values: dict[str, SubmissionValue] = Field(default_factory=dict)


class VisibleFieldsResponse(BaseModel):
    form_id: str
    visible_field_ids: list[str]


class AddFieldRequest(BaseModel):
    type: str


class SaveFormResponse(BaseModel):
    form_id: str
    form: FormConfig
    warnings: list[str]


class FileCheckResponse(BaseModel):
    field_id: str
    valid: bool
    error: str | None = None


class RegistrationResponse(BaseModel):
    success: bool
    errors: dict[str, str] | None = None
    submission: FormSubmission | None = None


class ListFormsResponse(BaseModel):
    forms: list[str]
    result_count: int
