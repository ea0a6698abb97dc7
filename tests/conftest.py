from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.ocr import OCRService


def vision_response(text=None, error=""):
    """Shape of a google.cloud.vision AnnotateImageResponse, as far as OCRService reads it"""
    annotations = [SimpleNamespace(description=text)] if text is not None else []
    return SimpleNamespace(text_annotations=annotations, error=SimpleNamespace(message=error))


class FakeVisionClient:
    def __init__(self, response=None, exc=None):
        self.response = response if response is not None else vision_response()
        self.exc = exc
        self.images = []

    def text_detection(self, image):
        self.images.append(image)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def vision_client():
    return FakeVisionClient()


@pytest.fixture
def make_client(vision_client):
    """TestClient for an app built with the given settings overrides"""
    clients = []

    def _make(**overrides):
        settings = Settings(_env_file=None, **overrides)
        c = TestClient(create_app(ocr_service=OCRService(vision_client), settings=settings))
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
