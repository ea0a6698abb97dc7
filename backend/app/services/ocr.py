from typing import Any

from google.cloud import vision

from app.core.logging_config import get_logger

logger = get_logger(__name__)


class OCRServiceError(Exception):
    """Raised when the recognition service cannot return text for an image."""


def create_vision_client() -> vision.ImageAnnotatorClient:
    """
    Build the Vision client. Credentials are resolved by Google's default
    discovery (GOOGLE_APPLICATION_CREDENTIALS, metadata server, ...).
    """
    return vision.ImageAnnotatorClient()


class OCRService:
    """
    Service for extracting the full text of a receipt image.
    Wraps a Google Cloud Vision client owned by the caller.
    """

    def __init__(self, client: Any):
        self.client = client

    def extract_text(self, image_bytes: bytes) -> str:
        """
        Run Vision text detection on raw image bytes.

        Args:
            image_bytes: Content of the uploaded image.

        Returns:
            The full recognized text (first annotation), or "" when the
            image contains no text.

        Raises:
            OCRServiceError: If the Vision call fails or reports an error.
        """
        try:
            response = self.client.text_detection(image=vision.Image(content=image_bytes))
        except Exception as e:
            logger.error("vision_request_failed", error=str(e), exc_info=True)
            raise OCRServiceError("Vision text detection failed") from e

        if response.error.message:
            logger.error("vision_response_error", error=response.error.message)
            raise OCRServiceError(response.error.message)

        annotations = response.text_annotations
        text = annotations[0].description if annotations else ""
        logger.info("vision_text_extracted", chars=len(text), annotations=len(annotations))
        return text
