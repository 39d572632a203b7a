from __future__ import annotations

import re
from typing import Any


def digits_only(v: Any) -> str:
    return re.sub(r"\D", "", str(v)) if v else ""


def parse_quantity(text: str) -> int:
    """Parses a user-typed quantity; zero and negatives are allowed (they remove the line)."""
    t = text.strip()
    if not re.fullmatch(r"-?\d+", t):
        raise ValueError(f"cantidad inválida: {text!r}")
    return int(t)


def require_product_id(text: str) -> str:
    t = text.strip()
    if not t:
        raise ValueError("falta el ID del producto")
    return t
