from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from slowapi import Limiter
from starlette.datastructures import UploadFile
from typing import Optional

from app.config import Settings
from app.core.logging_config import get_logger
from app.schemas import ParseTextRequest, ReceiptFields
from app.services.ocr import OCRService, OCRServiceError
from app.services.receipt_parser import receipt_parser

logger = get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ocr_service(request: Request) -> OCRService:
    """OCR service created once at startup and held on the app state"""
    ocr_service = getattr(request.app.state, "ocr_service", None)
    if ocr_service is None:
        raise HTTPException(status_code=503, detail="OCR service is not initialized.")
    return ocr_service


async def get_uploaded_file(request: Request) -> Optional[UploadFile]:
    """First file part of the multipart body, whatever its field name"""
    form = await request.form()
    for _, value in form.multi_items():
        if isinstance(value, UploadFile):
            return value
    return None


async def ocr_receipt(
    request: Request,
    response: Response,
    file: Optional[UploadFile] = Depends(get_uploaded_file),
    settings: Settings = Depends(get_app_settings),
    ocr_service: OCRService = Depends(get_ocr_service),
):
    """
    Run OCR on an uploaded receipt image and extract date, amount and notes.
    The image may be sent under any multipart field name (e.g. `file`, `image`).
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    max_bytes = settings.max_upload_bytes
    too_large = HTTPException(
        status_code=413,
        detail=f"File too large. Limit is {settings.MAX_UPLOAD_MB} MB.",
    )
    if file.size is not None and file.size > max_bytes:
        raise too_large

    # Never pull more than the limit into memory
    image_bytes = await file.read(max_bytes + 1)
    if not image_bytes:
        raise HTTPException(status_code=400, detail="No file uploaded.")
    if len(image_bytes) > max_bytes:
        raise too_large

    logger.info("receipt_upload_received", filename=file.filename, size=len(image_bytes))

    try:
        text = await run_in_threadpool(ocr_service.extract_text, image_bytes)
    except OCRServiceError as e:
        logger.error("receipt_ocr_failed", filename=file.filename, error=str(e))
        raise HTTPException(status_code=500, detail="Error processing image with Vision API.")

    fields = receipt_parser.parse(text)
    logger.info(
        "receipt_parsed",
        has_date=fields["date"] is not None,
        has_amount=fields["amount"] is not None,
        text_length=len(text),
    )
    return fields


async def parse_receipt_text(payload: ParseTextRequest):
    """Extract fields from already recognized receipt text (no OCR call)"""
    return receipt_parser.parse(payload.text)


def create_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """Receipt routes, with the upload limited by the application's own limiter"""
    router = APIRouter(prefix="/api/receipts", tags=["Receipts"])
    router.add_api_route(
        "/ocr",
        limiter.limit(rate_limit)(ocr_receipt),
        methods=["POST"],
        response_model=ReceiptFields,
    )
    router.add_api_route(
        "/parse",
        parse_receipt_text,
        methods=["POST"],
        response_model=ReceiptFields,
    )
    return router
