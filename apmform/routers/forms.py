from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from apmform.models.forms import (
    AddFieldRequest,
    FieldOption,
    FileCheckResponse,
    FileHandle,
    FormConfig,
    ListFormsResponse,
    RegistrationResponse,
    SaveFormResponse,
    SubmissionRequest,
    ValidationResult,
    VisibleFieldsResponse,
)
from apmform.services import forms as forms_service
from apmform.services.templates import FAKULTAS_LIST, FIELD_TEMPLATES, FieldTemplate

router = APIRouter(prefix="/api", tags=["forms"])


@router.get("/form-templates")
def list_field_templates() -> list[FieldTemplate]:
    return FIELD_TEMPLATES


@router.get("/fakultas")
def list_fakultas() -> list[FieldOption]:
    return FAKULTAS_LIST


@router.get("/forms")
def list_forms() -> ListFormsResponse:
    forms = forms_service.list_forms()
    return ListFormsResponse(forms=forms, result_count=len(forms))


@router.get("/forms/{form_id}")
def get_form(form_id: str) -> FormConfig:
    return forms_service.get_form(form_id)


@router.post("/forms/{form_id}", status_code=201)
def create_form(form_id: str) -> SaveFormResponse:
    return forms_service.create_form(form_id)


@router.put("/forms/{form_id}")
def save_form(form_id: str, form: FormConfig) -> SaveFormResponse:
    return forms_service.save_form(form_id, form)


@router.post("/forms/{form_id}/fields")
def add_field(form_id: str, request: AddFieldRequest) -> SaveFormResponse:
    return forms_service.add_field(form_id, request.type)


@router.delete("/forms/{form_id}", status_code=204)
def delete_form(form_id: str) -> Response:
    forms_service.delete_form(form_id)
    return Response(status_code=204)


@router.post("/forms/{form_id}/visible")
def visible_fields(form_id: str, request: SubmissionRequest) -> VisibleFieldsResponse:
    return forms_service.get_visible_fields(form_id, request.values)


@router.post("/forms/{form_id}/validate", responses={422: {"model": ValidationResult}})
def validate_submission(form_id: str, request: SubmissionRequest) -> ValidationResult:
    result = forms_service.validate(form_id, request.values)
    if not result.success:
        return JSONResponse(status_code=422, content=result.model_dump(mode="json"))
    return result


@router.post("/forms/{form_id}/register", responses={422: {"model": RegistrationResponse}})
def register(form_id: str, request: SubmissionRequest, http_request: Request) -> RegistrationResponse:
    result, submission = forms_service.register(
        form_id,
        request.values,
        user_agent=http_request.headers.get("user-agent"),
        ip_address=http_request.client.host if http_request.client else None,
    )
    response = RegistrationResponse(success=result.success, errors=result.errors, submission=submission)
    if not result.success:
        return JSONResponse(status_code=422, content=response.model_dump(mode="json", by_alias=True))
    return response


@router.post("/forms/{form_id}/fields/{field_id}/file-check")
def check_file(form_id: str, field_id: str, handle: FileHandle) -> FileCheckResponse:
    return forms_service.check_upload(form_id, field_id, handle)
