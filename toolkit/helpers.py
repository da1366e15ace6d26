"""Request and response helpers for FastAPI / Starlette handlers.

The upload helpers let Starlette parse the form, then hand the parts to the
blocking ingestion core in the threadpool.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, TypeVar

import httpx
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

from toolkit.errors import (
    InvalidJSON,
    IOFailure,
    MalformedMultipart,
    NotFound,
    RequestTooLarge,
    ToolkitError,
)
from toolkit.ingest import ingest_one_part, ingest_parts
from toolkit.multipart import parse_boundary
from toolkit.schemas.json_payload import JSONPayload
from toolkit.schemas.upload import UploadConfiguration, UploadedFile
from toolkit.utils.log_utils import log_phase
from toolkit.utils.storage_utils import resolve_inside

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_MAX_JSON_SIZE = 1024 * 1024  # 1 MB
DEFAULT_REMOTE_TIMEOUT = 10.0


# Uploads


async def _read_form(request: Request) -> FormData:
    parse_boundary(request.headers.get("content-type"))
    try:
        return await request.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        detail = getattr(exc, "message", None) or getattr(exc, "detail", str(exc))
        raise MalformedMultipart(f"Invalid multipart body: {detail}") from exc
    except ClientDisconnect as exc:
        raise IOFailure("Client disconnected while sending the request body") from exc


def _file_parts(form: FormData) -> list[UploadFile]:
    return [
        value
        for _, value in form.multi_items()
        if isinstance(value, UploadFile) and value.filename
    ]


async def upload_files(
    request: Request,
    destination_dir: str | os.PathLike,
    config: UploadConfiguration | None = None,
) -> list[UploadedFile]:
    """Store every file part of the request's multipart body.

    Raises:
        IngestError: see ``toolkit.ingest.ingest_parts``
    """
    config = config or UploadConfiguration()
    with log_phase(logger, "upload.form", context=request.url.path):
        form = await _read_form(request)
    try:
        with log_phase(logger, "upload.ingest", context=str(destination_dir)):
            return await run_in_threadpool(
                ingest_parts, _file_parts(form), destination_dir, config
            )
    finally:
        await form.close()


async def upload_one_file(
    request: Request,
    destination_dir: str | os.PathLike,
    config: UploadConfiguration | None = None,
) -> UploadedFile:
    """Store the first file part of the request under a generated name.

    Raises:
        NoFileProvided: if the form holds no file
    """
    with log_phase(logger, "upload.form", context=request.url.path):
        form = await _read_form(request)
    try:
        with log_phase(logger, "upload.ingest", context=str(destination_dir)):
            return await run_in_threadpool(
                ingest_one_part, _file_parts(form), destination_dir, config
            )
    finally:
        await form.close()


# JSON


async def read_json(
    request: Request,
    model: type[ModelT],
    *,
    max_bytes: int = DEFAULT_MAX_JSON_SIZE,
    allow_unknown_fields: bool = False,
) -> ModelT:
    """Decode a request body holding exactly one JSON object into ``model``.

    Raises:
        RequestTooLarge: if the body exceeds ``max_bytes``
        InvalidJSON: for empty bodies, bad syntax, trailing values, unknown
            keys (unless allowed) or values of the wrong type
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise RequestTooLarge(f"Body must not be larger than {max_bytes} bytes")

    if not body.strip():
        raise InvalidJSON("Body must not be empty")

    try:
        payload = json.loads(bytes(body))
    except json.JSONDecodeError as exc:
        if exc.msg == "Extra data":
            raise InvalidJSON("Body must only contain a single JSON value") from exc
        raise InvalidJSON(f"Body contains badly-formed JSON (at character {exc.pos})") from exc
    except ValueError as exc:
        raise InvalidJSON("Body is not valid UTF-8 JSON") from exc

    if not allow_unknown_fields:
        if not isinstance(payload, dict):
            raise InvalidJSON("Body must be a JSON object")
        known = set(model.model_fields)
        known.update(f.alias for f in model.model_fields.values() if f.alias)
        for key in payload:
            if key not in known:
                raise InvalidJSON(f"Body contains unknown key '{key}'")

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"]) or "body"
        raise InvalidJSON(f"Body contains an incorrect value for '{location}': {error['msg']}") from exc


def write_json(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Serialize ``data`` (models included, ``None`` fields dropped) into a JSON response."""
    return JSONResponse(
        content=jsonable_encoder(data, exclude_none=True),
        status_code=status_code,
        headers=headers,
    )


def error_json(err: Exception, status_code: int | None = None) -> JSONResponse:
    """Build an ``{"error": true, "message": ...}`` response for ``err``.

    The status defaults to the error's own ``status_code`` for toolkit errors
    and to 400 otherwise.
    """
    if status_code is None:
        status_code = (
            err.status_code if isinstance(err, ToolkitError) else status.HTTP_400_BAD_REQUEST
        )
    message = err.message if isinstance(err, ToolkitError) else str(err)
    return write_json(JSONPayload(error=True, message=message), status_code=status_code)


def push_json_to_remote(
    uri: str,
    data: Any,
    client: httpx.Client | None = None,
) -> httpx.Response:
    """POST ``data`` as JSON to ``uri`` and return the response, whatever its status.

    Transport failures propagate as ``httpx.HTTPError``.
    """
    payload = jsonable_encoder(data)
    if client is None:
        with httpx.Client(timeout=DEFAULT_REMOTE_TIMEOUT) as own_client:
            response = own_client.post(uri, json=payload)
    else:
        response = client.post(uri, json=payload)

    logger.debug(f"[remote.push] {uri} -> {response.status_code}")
    return response


# Files


def download_static_file(
    directory: str | os.PathLike,
    filename: str,
    display_name: str,
) -> FileResponse:
    """Serve ``directory/filename`` as an attachment named ``display_name``.

    Raises:
        NotFound: if the file is missing or lies outside ``directory``
    """
    try:
        path = resolve_inside(directory, filename)
    except ValueError as exc:
        raise NotFound(f"File '{filename}' not found") from exc
    if not path.is_file():
        raise NotFound(f"File '{filename}' not found")

    return FileResponse(path, filename=display_name)
