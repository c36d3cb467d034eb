"""Form-builder palette, defaults and author-facing checks."""

import random
import re
import string
import time
from collections import Counter
from typing import Any, Literal

from pydantic import BaseModel

from apmform.models.forms import SELECTION_TYPES, FieldOption, FieldType, FormConfig, FormField, FormSettings

FieldCategory = Literal["basic", "contact", "selection", "file", "datetime", "special"]


class FieldTemplate(BaseModel):
    type: FieldType
    label: str
    icon: str
    category: FieldCategory
    default_config: dict[str, Any] = {}


FAKULTAS_LIST = [
    FieldOption(value="ft", label="Fakultas Teknik"),
    FieldOption(value="fk", label="Fakultas Kedokteran"),
    FieldOption(value="fh", label="Fakultas Hukum"),
    FieldOption(value="feb", label="Fakultas Ekonomika dan Bisnis"),
    FieldOption(value="fisip", label="Fakultas Ilmu Sosial dan Ilmu Politik"),
    FieldOption(value="fib", label="Fakultas Ilmu Budaya"),
    FieldOption(value="fpsi", label="Fakultas Psikologi"),
    FieldOption(value="fpp", label="Fakultas Peternakan dan Pertanian"),
    FieldOption(value="fsm", label="Fakultas Sains dan Matematika"),
    FieldOption(value="fkm", label="Fakultas Kesehatan Masyarakat"),
    FieldOption(value="fpi", label="Fakultas Perikanan dan Ilmu Kelautan"),
    FieldOption(value="sv", label="Sekolah Vokasi"),
]

NIM_VALIDATION = {
    "minLength": 8,
    "maxLength": 20,
    "pattern": "^[0-9A-Za-z]+$",
    "patternMessage": "NIM hanya boleh berisi huruf dan angka",
}

_DEFAULT_OPTIONS = [{"value": "option1", "label": "Option 1"}]

FIELD_TEMPLATES = [
    # Basic
    FieldTemplate(type=FieldType.TEXT, label="Text Input", icon="type", category="basic",
                  default_config={"placeholder": "Masukkan teks..."}),
    FieldTemplate(type=FieldType.TEXTAREA, label="Text Area", icon="align-left", category="basic",
                  default_config={"placeholder": "Masukkan teks panjang..."}),
    FieldTemplate(type=FieldType.NUMBER, label="Number", icon="hash", category="basic",
                  default_config={"placeholder": "0"}),
    # Contact
    FieldTemplate(type=FieldType.EMAIL, label="Email", icon="mail", category="contact",
                  default_config={"placeholder": "email@example.com"}),
    FieldTemplate(type=FieldType.PHONE, label="Phone/WhatsApp", icon="phone", category="contact",
                  default_config={"placeholder": "08xxxxxxxxxx"}),
    FieldTemplate(type=FieldType.URL, label="URL", icon="link", category="contact",
                  default_config={"placeholder": "https://..."}),
    # Selection
    FieldTemplate(type=FieldType.SELECT, label="Dropdown", icon="chevron-down", category="selection",
                  default_config={"options": _DEFAULT_OPTIONS}),
    FieldTemplate(type=FieldType.RADIO, label="Radio Buttons", icon="circle", category="selection",
                  default_config={"options": _DEFAULT_OPTIONS}),
    FieldTemplate(type=FieldType.CHECKBOX, label="Checkboxes", icon="check-square", category="selection",
                  default_config={"options": _DEFAULT_OPTIONS}),
    FieldTemplate(type=FieldType.MULTISELECT, label="Multi Select", icon="list", category="selection",
                  default_config={"options": _DEFAULT_OPTIONS}),
    # File
    FieldTemplate(type=FieldType.FILE, label="File Upload", icon="upload", category="file",
                  default_config={"validation": {
                      "maxFileSize": 5 * 1024 * 1024,
                      "allowedFileTypes": ["image/*", "application/pdf"],
                  }}),
    # Date & time
    FieldTemplate(type=FieldType.DATE, label="Date", icon="calendar", category="datetime"),
    FieldTemplate(type=FieldType.TIME, label="Time", icon="clock", category="datetime"),
    FieldTemplate(type=FieldType.DATETIME, label="Date & Time", icon="calendar-clock", category="datetime"),
    # Pre-configured portal fields
    FieldTemplate(type=FieldType.NIM, label="NIM", icon="id-card", category="special",
                  default_config={"label": "NIM", "placeholder": "Masukkan NIM", "validation": NIM_VALIDATION}),
    FieldTemplate(type=FieldType.FAKULTAS, label="Fakultas", icon="building", category="special",
                  default_config={"label": "Fakultas", "options": [o.model_dump() for o in FAKULTAS_LIST]}),
    FieldTemplate(type=FieldType.PRODI, label="Program Studi", icon="graduation-cap", category="special",
                  default_config={"label": "Program Studi", "placeholder": "Masukkan program studi"}),
]

DEFAULT_FORM_SETTINGS = FormSettings()


def get_template(field_type: str) -> FieldTemplate | None:
    for template in FIELD_TEMPLATES:
        if template.type == field_type:
            return template
    return None


def generate_field_id() -> str:
    """Unique-enough field id: ``field_<epoch millis>_<9 base36 chars>``."""
    suffix = "".join(random.choices(string.digits + string.ascii_lowercase, k=9))
    return f"field_{int(time.time() * 1000)}_{suffix}"


def create_field_from_template(template: FieldTemplate, order: int) -> FormField:
    data = {
        "id": generate_field_id(),
        "type": template.type.value,
        "label": template.label,
        "required": False,
        "order": order,
        **template.default_config,
    }
    return FormField.model_validate(data)


def create_empty_form_config() -> FormConfig:
    return FormConfig(fields=[], settings=DEFAULT_FORM_SETTINGS.model_copy(), version=1)


def is_valid_form_config(raw: Any) -> bool:
    """Structural check on undecoded JSON: a ``fields`` list and a ``settings`` object."""
    if not isinstance(raw, dict):
        return False
    return isinstance(raw.get("fields"), list) and isinstance(raw.get("settings"), dict)


def lint_form_config(form: FormConfig) -> list[str]:
    """Warnings for the form author. The engine tolerates all of these."""
    warnings = []
    ids = Counter(f.id for f in form.fields)
    for field_id, count in ids.items():
        if count > 1:
            warnings.append(f"Duplicate field id '{field_id}' ({count} fields)")

    for field in form.sorted_fields():
        if field.type not in {t.value for t in FieldType}:
            warnings.append(f"Field '{field.id}' has unknown type '{field.type}'")
        if field.type in SELECTION_TYPES and not field.options:
            warnings.append(f"Field '{field.id}' ({field.type}) has no options")
        if field.validation is not None and field.validation.pattern:
            try:
                re.compile(field.validation.pattern)
            except re.error as e:
                warnings.append(f"Field '{field.id}' has an invalid pattern: {e}")
        if field.condition is not None:
            for condition in field.condition.conditions:
                if condition.field not in ids:
                    warnings.append(f"Field '{field.id}' depends on unknown field '{condition.field}'")
                elif condition.field == field.id:
                    warnings.append(f"Field '{field.id}' depends on itself")
    return warnings
