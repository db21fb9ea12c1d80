"""Intervention report PDF rendering"""

from .generator import (
    MAX_PHOTOS,
    InterventionReportGenerator,
    ReportRenderError,
    generate_intervention_pdf,
    read_logo,
)
from .images import ImageDecodeError, decode_payload, load_image
from .text_layout import wrap_text

__all__ = [
    "MAX_PHOTOS",
    "ImageDecodeError",
    "InterventionReportGenerator",
    "ReportRenderError",
    "decode_payload",
    "generate_intervention_pdf",
    "load_image",
    "read_logo",
    "wrap_text",
]
