import math
import re
from typing import Any
from config import STORAGE_KEY_PREFIX

_NON_NUMERIC = re.compile(r'[^0-9.\-]')

def parse_amount(value: Any) -> float:
    """Convert a spreadsheet cell to float, 0.0 when it cannot be read"""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return 0.0 if math.isnan(number) or math.isinf(number) else number
    cleaned = _NON_NUMERIC.sub('', str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0

def normalize_text(value: Any) -> str:
    """Cell to stripped string; NaN and None become empty"""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()

def calculate_percentage(part: float, total: float) -> float:
    """Calculate percentage safely"""
    if total == 0:
        return 0.0
    return (part / total) * 100

def build_storage_key(company_id: str, period: str) -> str:
    """Key under which a period's validation result is stored"""
    return f"{STORAGE_KEY_PREFIX}:{company_id}:{period}"
