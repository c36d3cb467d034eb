import pytest

from fastapi.testclient import TestClient

from apmform.models.forms import FormConfig
from apmform.services.store import FormStore


# --- Canned form definitions (camelCase, as stored by the portal) ---

LOMBA_FORM = {
    "fields": [
        {
            "id": "nama_tim",
            "type": "text",
            "label": "Nama Tim",
            "required": True,
            "validation": {"minLength": 3, "maxLength": 50},
            "order": 1,
        },
        {
            "id": "kategori",
            "type": "select",
            "label": "Kategori",
            "required": True,
            "options": [
                {"value": "individu", "label": "Individu"},
                {"value": "tim", "label": "Tim"},
            ],
            "order": 2,
        },
        {
            "id": "anggota",
            "type": "textarea",
            "label": "Anggota Tim",
            "required": True,
            "condition": {
                "show": True,
                "logic": "and",
                "conditions": [{"field": "kategori", "operator": "equals", "value": "tim"}],
            },
            "order": 3,
        },
        {
            "id": "portofolio",
            "type": "url",
            "label": "Link Portofolio",
            "required": False,
            "order": 4,
        },
        {
            "id": "sumber",
            "type": "hidden",
            "label": "Sumber",
            "required": False,
            "order": 5,
        },
    ],
    "settings": {
        "submitButtonText": "Daftar",
        "successMessage": "Pendaftaran berhasil!",
        "allowMultipleSubmissions": False,
    },
    "version": 2,
}

# The A/B form from the conditional-field walkthrough.
YA_TIDAK_FORM = {
    "fields": [
        {
            "id": "A",
            "type": "select",
            "label": "Pernah ikut lomba?",
            "required": True,
            "options": [{"value": "ya", "label": "Ya"}, {"value": "tidak", "label": "Tidak"}],
            "order": 1,
        },
        {
            "id": "B",
            "type": "text",
            "label": "Alasan",
            "required": True,
            "condition": {
                "show": True,
                "logic": "and",
                "conditions": [{"field": "A", "operator": "equals", "value": "ya"}],
            },
            "order": 2,
        },
    ],
    "settings": {"submitButtonText": "Kirim", "successMessage": "OK", "allowMultipleSubmissions": True},
}


@pytest.fixture
def lomba_form() -> FormConfig:
    return FormConfig.model_validate(LOMBA_FORM)


@pytest.fixture
def ya_tidak_form() -> FormConfig:
    return FormConfig.model_validate(YA_TIDAK_FORM)


@pytest.fixture
def form_store(tmp_path, mocker):
    """FormStore in a temp dir, wired into the forms service."""
    store = FormStore(tmp_path / "forms")
    mocker.patch("apmform.services.forms.get_form_store", return_value=store)
    return store


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from apmform.main import api
    return TestClient(api)
