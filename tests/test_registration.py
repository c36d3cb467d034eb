from apmform.models.forms import FormConfig, FormField, FormSubmission
from apmform.services.registration import (
    BASE_FIELD_IDS,
    build_submission,
    merge_with_base_fields,
    validate_registration,
)

BASE_VALUES = {
    "nama": "Ani Lestari",
    "nim": "21120120130001",
    "email": "ani@students.undip.ac.id",
    "whatsapp": "081234567890",
    "fakultas": "ft",
    "prodi": "Teknik Komputer",
}


class TestMerge:
    def test_base_fields_come_first(self, lomba_form):
        merged = merge_with_base_fields(lomba_form)
        ids = [f.id for f in merged.sorted_fields()]
        assert ids[:6] == ["nama", "nim", "email", "whatsapp", "fakultas", "prodi"]
        assert ids[6:] == ["nama_tim", "kategori", "anggota", "portofolio", "sumber"]
        assert merged.settings == lomba_form.settings

    def test_custom_field_overrides_base(self):
        custom = FormConfig(fields=[FormField(id="prodi", type="select", label="Prodi", required=True, order=1)])
        merged = merge_with_base_fields(custom)
        prodi = [f for f in merged.fields if f.id == "prodi"]
        assert len(prodi) == 1
        assert prodi[0].type == "select"

    def test_without_custom_form(self):
        merged = merge_with_base_fields(None)
        assert {f.id for f in merged.fields} == BASE_FIELD_IDS

    def test_does_not_mutate_input(self, lomba_form):
        merge_with_base_fields(lomba_form)
        assert len(lomba_form.fields) == 5


class TestValidateRegistration:
    def test_valid(self, lomba_form):
        body = {**BASE_VALUES, "nama_tim": "Garuda", "kategori": "individu"}
        result = validate_registration(lomba_form, body)
        assert result.success
        assert result.data == body

    def test_base_field_errors(self, lomba_form):
        body = {**BASE_VALUES, "nim": "21-12", "email": "ani", "nama_tim": "Garuda", "kategori": "individu"}
        result = validate_registration(lomba_form, body)
        assert result.errors == {
            "nim": "NIM minimal 8 karakter",
            "email": "Format email tidak valid",
        }

    def test_missing_everything(self):
        result = validate_registration(None, {})
        assert result.errors["nama"] == "Nama wajib diisi"
        assert result.errors["prodi"] == "Program Studi wajib diisi"
        assert len(result.errors) == 6

    def test_whatsapp_message_names_the_field(self):
        result = validate_registration(None, {**BASE_VALUES, "whatsapp": "08123"})
        assert result.errors == {"whatsapp": "Nomor WhatsApp minimal 10 digit"}


class TestBuildSubmission:
    def test_metadata(self, lomba_form):
        submission = build_submission({"a": 1}, lomba_form, user_agent="pytest", ip_address="127.0.0.1")
        assert isinstance(submission, FormSubmission)
        assert submission.data == {"a": 1}
        assert submission.metadata.form_version == 2
        assert submission.metadata.user_agent == "pytest"
        assert submission.metadata.submitted_at
