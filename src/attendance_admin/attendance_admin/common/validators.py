from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_DIGITS = re.compile(r"\D")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    """Blank strings and the literal 'null' some clients send become None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == "null":
        return None
    return text


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido")


def normalize_cpf(value: Optional[str]) -> str:
    digits = _DIGITS.sub("", value or "")
    if not digits:
        raise ValidationError("CPF é obrigatório")
    return digits


def format_cpf(value: Optional[str]) -> str:
    if not value:
        return "-"
    digits = _DIGITS.sub("", str(value))
    if len(digits) != 11:
        return str(value)
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
