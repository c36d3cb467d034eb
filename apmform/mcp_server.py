from fastmcp import FastMCP

from apmform.exceptions import FormDefinitionError, FormNotFoundError
from apmform.services import forms as forms_service
from apmform.services.templates import FIELD_TEMPLATES

mcp = FastMCP("APM Forms")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, FormNotFoundError):
        return {"error": "not_found", "message": str(e), "action": "Call forms_list to see available form ids"}
    if isinstance(e, FormDefinitionError):
        return {"error": "invalid_form", "message": str(e), "action": "Ask an administrator to fix the form definition"}
    return {"error": "unknown_error", "message": str(e)}


@mcp.tool
def forms_list() -> dict:
    """List the ids of all stored registration forms."""
    forms = forms_service.list_forms()
    return {"forms": forms, "count": len(forms)}


@mcp.tool
def forms_get(form_id: str) -> dict:
    """Get a form definition: its fields (type, label, options, validation, condition) and settings."""
    try:
        return forms_service.get_form(form_id).model_dump(mode="json", by_alias=True, exclude_none=True)
    except (FormNotFoundError, FormDefinitionError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_visible_fields(form_id: str, values: dict) -> dict:
    """Return the ids of the fields visible for the given answers, in display order.
    Call again after every answer change: later questions may depend on earlier ones."""
    try:
        return forms_service.get_visible_fields(form_id, values).model_dump()
    except (FormNotFoundError, FormDefinitionError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_validate_submission(form_id: str, values: dict) -> dict:
    """Validate answers against a form. Returns success with the accepted data,
    or errors keyed by field id (Indonesian messages, one per field)."""
    try:
        return forms_service.validate(form_id, values).model_dump(mode="json")
    except (FormNotFoundError, FormDefinitionError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_field_templates() -> dict:
    """List the field types a form author can add, with their default configuration."""
    return {"templates": [t.model_dump(mode="json") for t in FIELD_TEMPLATES], "count": len(FIELD_TEMPLATES)}
