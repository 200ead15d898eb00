from __future__ import annotations

import os


DEFAULT_LARGE_EXPENSE_THRESHOLD = 10000.0
DEFAULT_OCR_PROJECT_ID = "default-project-id"
DEFAULT_OCR_SUPPLIER_ID = "unknown-supplier-id"
OCR_REVIEW_CONFIDENCE = 0.8
OCR_WARNING_CONFIDENCE = 0.7
OCR_MIN_CONFIDENCE = 0.3
OCR_USER_ID = "system-ocr"
# float slack when comparing accumulated payments with a total
PAYMENT_TOLERANCE = 1e-6


def large_expense_threshold() -> float:
    raw = (os.getenv("JC_LARGE_EXPENSE_THRESHOLD", "") or "").strip()
    if not raw:
        return DEFAULT_LARGE_EXPENSE_THRESHOLD
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_LARGE_EXPENSE_THRESHOLD
    return value if value > 0 else DEFAULT_LARGE_EXPENSE_THRESHOLD


def ocr_default_project_id() -> str:
    return (os.getenv("JC_OCR_DEFAULT_PROJECT_ID", "") or "").strip() or DEFAULT_OCR_PROJECT_ID


def ocr_default_supplier_id() -> str:
    return (os.getenv("JC_OCR_DEFAULT_SUPPLIER_ID", "") or "").strip() or DEFAULT_OCR_SUPPLIER_ID


__all__ = [
    "DEFAULT_LARGE_EXPENSE_THRESHOLD",
    "DEFAULT_OCR_PROJECT_ID",
    "DEFAULT_OCR_SUPPLIER_ID",
    "OCR_REVIEW_CONFIDENCE",
    "OCR_WARNING_CONFIDENCE",
    "OCR_MIN_CONFIDENCE",
    "OCR_USER_ID",
    "PAYMENT_TOLERANCE",
    "large_expense_threshold",
    "ocr_default_project_id",
    "ocr_default_supplier_id",
]
