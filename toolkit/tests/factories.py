"""Builders for multipart bodies and image payloads used across tests."""

from __future__ import annotations

import io

from PIL import Image, ImageDraw

BOUNDARY = "toolkit-test-boundary"


def encode_multipart(
    parts: list[tuple[str, str | None, bytes, str | None]],
    boundary: str = BOUNDARY,
) -> tuple[bytes, str]:
    """Build a multipart/form-data body.

    Each part is ``(field name, filename or None, content, content type or None)``;
    parts without a filename are encoded as plain form fields.

    Returns:
        (body bytes, Content-Type header value)
    """
    body = bytearray()
    for field, filename, content, content_type in parts:
        body += f"--{boundary}\r\n".encode()
        disposition = f'Content-Disposition: form-data; name="{field}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        body += f"{disposition}\r\n".encode()
        if content_type:
            body += f"Content-Type: {content_type}\r\n".encode()
        body += b"\r\n" + content + b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return bytes(body), f"multipart/form-data; boundary={boundary}"


def _sample_image(width: int, height: int) -> Image.Image:
    img = Image.new("RGB", (width, height), color="white")
    draw = ImageDraw.Draw(img)
    for x in range(0, width, 6):
        draw.line((x, 0, x, height), fill=(x * 4 % 256, 40, 160), width=1)
    for y in range(0, height, 5):
        draw.line((0, y, width, y), fill=(200, y * 5 % 256, 30), width=1)
    draw.rectangle((width // 4, height // 4, width * 3 // 4, height * 3 // 4), outline="black", width=2)
    return img


def _encode(img: Image.Image, fmt: str) -> bytes:
    buf = io.BytesIO()
    img.save(buf, fmt)
    return buf.getvalue()


def make_png(width: int = 120, height: int = 90) -> bytes:
    return _encode(_sample_image(width, height), "PNG")


def make_jpeg(width: int = 120, height: int = 90) -> bytes:
    return _encode(_sample_image(width, height), "JPEG")


def make_gif(width: int = 32, height: int = 32) -> bytes:
    return _encode(_sample_image(width, height), "GIF")
