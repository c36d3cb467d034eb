import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from apmform.config import get_settings
from apmform.exceptions import FormDefinitionError, FormNotFoundError
from apmform.models.forms import FormConfig
from apmform.services.templates import is_valid_form_config

logger = logging.getLogger(__name__)

_FORM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class FormStore:
    """Reads/writes form definitions as JSON files, one ``<form_id>.json`` per form."""

    def __init__(self, directory: Path):
        self.directory = directory

    def _path(self, form_id: str, error: type[Exception] = FormNotFoundError) -> Path:
        if not _FORM_ID_PATTERN.match(form_id):
            raise error(f"Invalid form id '{form_id}'")
        return self.directory / f"{form_id}.json"

    def list_ids(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def exists(self, form_id: str) -> bool:
        return self._path(form_id, FormDefinitionError).exists()

    def get(self, form_id: str) -> FormConfig:
        path = self._path(form_id)
        if not path.exists():
            raise FormNotFoundError(f"Form '{form_id}' not found")
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            if not is_valid_form_config(raw):
                raise FormDefinitionError(f"Form '{form_id}' needs a 'fields' list and a 'settings' object")
            return FormConfig.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            raise FormDefinitionError(f"Form '{form_id}' is not a valid form definition: {e}") from e

    def save(self, form_id: str, form: FormConfig) -> None:
        path = self._path(form_id, FormDefinitionError)
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(form.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2),
            encoding="utf-8",
        )
        logger.info("Saved form %s (%d fields)", form_id, len(form.fields))

    def delete(self, form_id: str) -> None:
        path = self._path(form_id)
        if not path.exists():
            raise FormNotFoundError(f"Form '{form_id}' not found")
        path.unlink()
        logger.info("Deleted form %s", form_id)


def get_form_store() -> FormStore:
    return FormStore(get_settings().forms_dir)
