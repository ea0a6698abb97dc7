import re
from typing import Dict, Any, Optional

NOTES_PLACEHOLDER = "OCRからの摘要"

# 2025年09月03日, 2025/9/3, 2025-09-03, 2025.09.03, 2025－09－03
DATE_PATTERN = re.compile(r"([0-9]{4})[年/\-.－]([0-9]{1,2})[月/\-.－]([0-9]{1,2})日?")

# 合計 = total, 請求額 = amount due, "\" is how the yen sign renders in some fonts
LABELED_AMOUNT_PATTERN = re.compile(r"(?:合計|請求額|¥|\\)\s*([0-9,]+)", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"[0-9,]+")


def _to_int(token: str) -> Optional[int]:
    try:
        return int(token.replace(",", ""))
    except ValueError:
        return None


class ReceiptParser:
    """
    Heuristic extraction of date, amount and notes from OCR'd receipt text.
    Never raises: unmatched fields come back as None.
    """

    def parse(self, text: Optional[str]) -> Dict[str, Any]:
        text = text or ""
        return {
            "date": self._extract_date(text),
            "amount": self._extract_amount(text),
            "notes": self._extract_notes(text),
        }

    def _extract_notes(self, text: str) -> str:
        # First line is usually the store name
        return text.split("\n")[0] or NOTES_PLACEHOLDER

    def _extract_date(self, text: str) -> Optional[str]:
        match = DATE_PATTERN.search(text)
        if not match:
            return None
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    def _extract_amount(self, text: str) -> Optional[int]:
        # Label or currency symbol wins, whatever its magnitude
        for match in LABELED_AMOUNT_PATTERN.finditer(text):
            amount = _to_int(match.group(1))
            if amount is not None:
                return amount

        # Fallback: largest number on the receipt
        candidates = [_to_int(token) for token in NUMBER_PATTERN.findall(text)]
        positives = [n for n in candidates if n is not None and n > 0]
        return max(positives) if positives else None


receipt_parser = ReceiptParser()


def parse(text: Optional[str]) -> Dict[str, Any]:
    return receipt_parser.parse(text)
