"""File checks applied where uploads arrive, before a FileHandle is issued.

The form validator accepts any value for ``file`` fields; size and type limits
from the field's validation bag are enforced here instead.
"""

import fnmatch
import mimetypes
from pathlib import PurePosixPath

from apmform.config import get_settings
from apmform.models.forms import FileHandle, FormField


def _format_megabytes(size: int) -> str:
    mb = size / (1024 * 1024)
    return f"{mb:g}"


def _mime_type(handle: FileHandle) -> str | None:
    if handle.mime_type:
        return handle.mime_type.lower()
    guessed, _ = mimetypes.guess_type(handle.name)
    return guessed


def is_allowed_type(handle: FileHandle, allowed: list[str]) -> bool:
    """Match against MIME patterns (``image/*``, ``application/pdf``) or extensions (``.pdf``)."""
    mime = _mime_type(handle)
    suffix = PurePosixPath(handle.name).suffix.lower()
    for pattern in allowed:
        pattern = pattern.strip().lower()
        if pattern.startswith("."):
            if suffix == pattern:
                return True
        elif mime and fnmatch.fnmatchcase(mime, pattern):
            return True
    return False


def check_file(field: FormField, handle: FileHandle) -> str | None:
    """Return an error message for ``handle``, or None if it may be attached to ``field``."""
    validation = field.validation
    max_size = validation.max_file_size if validation and validation.max_file_size else get_settings().max_upload_size
    if handle.size is not None and handle.size > max_size:
        return f"Ukuran file {field.label} maksimal {_format_megabytes(max_size)} MB"
    if validation and validation.allowed_file_types and not is_allowed_type(handle, validation.allowed_file_types):
        return f"Tipe file {field.label} tidak diizinkan"
    return None
