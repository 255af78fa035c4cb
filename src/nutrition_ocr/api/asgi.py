"""ASGI entrypoint for the nutrition OCR API."""

from nutrition_ocr.api.app import create_app
from nutrition_ocr.containers import build_container

app = create_app(build_container())
