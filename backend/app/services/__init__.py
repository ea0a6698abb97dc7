from . import ocr
from . import receipt_parser

__all__ = ['ocr', 'receipt_parser']
