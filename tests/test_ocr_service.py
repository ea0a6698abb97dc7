import pytest

from app.services.ocr import OCRService, OCRServiceError
from conftest import FakeVisionClient, vision_response


def test_extract_text_returns_first_annotation():
    response = vision_response(text="レシート\n合計 ¥500")
    response.text_annotations.append(vision_response(text="レシート").text_annotations[0])
    client = FakeVisionClient(response=response)

    assert OCRService(client).extract_text(b"img") == "レシート\n合計 ¥500"
    assert client.images[0].content == b"img"


def test_extract_text_without_annotations_is_empty():
    client = FakeVisionClient(response=vision_response())
    assert OCRService(client).extract_text(b"img") == ""


def test_error_in_response_raises():
    client = FakeVisionClient(response=vision_response(error="Bad image data."))
    with pytest.raises(OCRServiceError, match="Bad image data."):
        OCRService(client).extract_text(b"img")


def test_client_exception_is_wrapped():
    boom = RuntimeError("deadline exceeded")
    client = FakeVisionClient(exc=boom)
    with pytest.raises(OCRServiceError) as excinfo:
        OCRService(client).extract_text(b"img")
    assert excinfo.value.__cause__ is boom
