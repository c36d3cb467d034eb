import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.routing import Mount

from apmform.config import get_settings
from apmform.exceptions import FormDefinitionError, FormNotFoundError
from apmform.mcp_server import mcp
from apmform.models.common import ErrorResponse, StatusResponse
from apmform.routers.forms import router as forms_router
from apmform.services.store import get_form_store

logger = logging.getLogger(__name__)


# --- FastAPI app ---

api = FastAPI(title="APM Forms", version="0.1.0")
api.include_router(forms_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    store = get_form_store()
    return StatusResponse(
        service="apmform",
        forms_dir=str(store.directory),
        form_count=len(store.list_ids()),
    )


# --- Exception handlers ---

@api.exception_handler(FormNotFoundError)
async def not_found_handler(request: Request, exc: FormNotFoundError):
    return JSONResponse(status_code=404, content=ErrorResponse(error_code="not_found", message=str(exc)).model_dump())


@api.exception_handler(FormDefinitionError)
async def form_definition_error_handler(request: Request, exc: FormDefinitionError):
    logger.error("Broken form definition: %s", exc)
    return JSONResponse(status_code=400, content=ErrorResponse(error_code="invalid_form", message=str(exc)).model_dump())


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "apmform.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
