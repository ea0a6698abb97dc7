from pydantic import BaseModel
from typing import Optional

# Receipt Models
class ReceiptFields(BaseModel):
    date: Optional[str] = None  # YYYY-MM-DD
    amount: Optional[int] = None
    notes: str

class ParseTextRequest(BaseModel):
    text: str = ""

# Service Models
class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    ocr_ready: bool
