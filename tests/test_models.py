from apmform.models.forms import FieldCondition, FormConfig, FormField, SubmissionRequest, FileHandle
from conftest import LOMBA_FORM


class TestFormConfig:
    def test_round_trip(self):
        config = FormConfig.model_validate(LOMBA_FORM)
        dumped = config.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert FormConfig.model_validate(dumped) == config
        assert dumped["fields"][2]["condition"]["conditions"][0]["operator"] == "equals"

    def test_snake_case_accepted(self):
        field = FormField(id="a", type="text", label="A", help_text="bantuan")
        assert field.model_dump(by_alias=True)["helpText"] == "bantuan"

    def test_defaults(self):
        config = FormConfig.model_validate({"fields": [{"id": "a", "type": "text", "label": "A"}]})
        assert config.settings.submit_button_text == "Daftar"
        assert config.fields[0].required is False
        assert config.fields[0].order == 0

    def test_unknown_type_and_operator_survive(self):
        field = FormField.model_validate({
            "id": "x", "type": "signature", "label": "X",
            "condition": {"show": True, "logic": "or", "conditions": [{"field": "y", "operator": "matches"}]},
        })
        assert field.type == "signature"
        assert field.condition.conditions[0].operator == "matches"


class TestLegacyConditions:
    def test_bare_condition_is_wrapped(self):
        field = FormField.model_validate({
            "id": "x", "type": "text", "label": "X",
            "condition": {"field": "y", "operator": "not_empty"},
        })
        assert field.condition.show is True
        assert field.condition.logic == "and"
        assert field.condition.conditions == [FieldCondition(field="y", operator="is_not_empty")]

    def test_legacy_operator(self):
        assert FieldCondition.model_validate({"field": "y", "operator": "empty"}).operator == "is_empty"

    def test_numeric_list_value_keeps_types(self):
        condition = FieldCondition.model_validate({"field": "semester", "operator": "in", "value": [1, 2, True]})
        assert condition.value == [1, 2, True]
        assert type(condition.value[0]) is int
        assert condition.value[2] is True

    def test_form_with_numeric_membership_loads(self):
        config = FormConfig.model_validate({"fields": [
            {"id": "semester", "type": "number", "label": "Semester"},
            {"id": "alasan", "type": "text", "label": "Alasan",
             "condition": {"conditions": [{"field": "semester", "operator": "not_in", "value": [1, 2]}]}},
        ]})
        assert config.get_field("alasan").condition.conditions[0].value == [1, 2]


class TestSubmissionRequest:
    def test_value_types(self):
        request = SubmissionRequest.model_validate({"values": {
            "s": "teks", "n": 3, "f": 2.5, "b": True, "l": ["a", "b"], "none": None,
            "file": {"name": "cv.pdf", "size": 10, "mimeType": "application/pdf"},
        }})
        assert request.values["n"] == 3
        assert request.values["b"] is True
        assert request.values["l"] == ["a", "b"]
        assert request.values["file"] == FileHandle(name="cv.pdf", size=10, mime_type="application/pdf")
