"""JSON envelope schemas."""

from typing import Any

from pydantic import BaseModel


class JSONPayload(BaseModel):
    """Envelope written by ``write_json`` and ``error_json``."""

    error: bool = False
    message: str = ""
    data: Any | None = None
