"""JSON utility routes."""

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from toolkit.dependencies import SettingsDep
from toolkit.helpers import read_json, write_json
from toolkit.schemas.json_payload import JSONPayload
from toolkit.utils.slug import slugify

router = APIRouter()


class EchoRequest(BaseModel):
    """Body accepted by the echo endpoint."""

    message: str
    tags: list[str] = []


class SlugRequest(BaseModel):
    """Body accepted by the slug endpoint."""

    text: str


@router.post("/echo")
async def echo(request: Request, settings: SettingsDep):
    """Decode a strict JSON body and send it back in the standard envelope."""
    payload = await read_json(
        request,
        EchoRequest,
        max_bytes=settings.max_json_size,
        allow_unknown_fields=settings.allow_unknown_json_fields,
    )
    return write_json(JSONPayload(message="received", data=payload))


@router.post("/slug")
async def make_slug(request: Request, settings: SettingsDep):
    """Turn arbitrary text into a URL slug."""
    payload = await read_json(request, SlugRequest, max_bytes=settings.max_json_size)
    try:
        slug = slugify(payload.text)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return write_json(JSONPayload(message="slug created", data={"slug": slug}))
