import base64
import io
import struct
import zlib
from datetime import datetime

import pytest
from PIL import Image

from piscineo.domain.interventions.schemas import ReportRecord


def image_bytes(fmt: str = "JPEG", size=(64, 48), color=(14, 116, 144)) -> bytes:
    mode = "RGBA" if fmt == "PNG" else "RGB"
    fill = color + (255,) if mode == "RGBA" else color
    img = Image.new(mode, size, color=fill)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def image_payload(fmt: str = "JPEG", size=(64, 48), data_url: bool = True) -> str:
    encoded = base64.b64encode(image_bytes(fmt, size)).decode("ascii")
    if not data_url:
        return encoded
    return f"data:image/{fmt.lower()};base64,{encoded}"


CORRUPT_PAYLOAD = "data:image/jpeg;base64," + base64.b64encode(b"definitely not an image").decode()


def oversized_png_payload(width=20000, height=20000) -> str:
    """Valid PNG header announcing far more pixels than Pillow will open"""

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    data = (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )
    return "data:image/png;base64," + base64.b64encode(data).decode("ascii")


@pytest.fixture
def make_payload():
    return image_payload


@pytest.fixture
def make_record():
    def _make(**overrides) -> ReportRecord:
        data = {
            "id": "c7f3a9e2b41d4f0a9e1b",
            "description": "Nettoyage standard",
            "date": datetime(2025, 6, 12, 9, 30),
            "client": {
                "firstName": "Jean",
                "lastName": "Dupont",
                "address": "12 rue des Lilas, 69003 Lyon",
                "phone": "0612345678",
                "email": "jean.dupont@example.com",
            },
        }
        client = overrides.pop("client", None)
        if client:
            data["client"] = {**data["client"], **client}
        data.update(overrides)
        return ReportRecord.model_validate(data)

    return _make


class FakeSender:
    """Stands in for email_service.send_email and records every call"""

    def __init__(self, error: Exception = None):
        self.calls = []
        self.error = error

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"id": "fake-1", "success": True}


@pytest.fixture
def fake_sender():
    return FakeSender()
