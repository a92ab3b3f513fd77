from __future__ import annotations

import re
from uuid import uuid4

_UNSAFE = re.compile(r"[^A-Z0-9]+")


def generate_cycle_code(prefix: str, dam_id: str, season_year: int) -> str:
    """Traceability code such as ``REP-2025-VACA17-3F9A1C``."""
    dam_fragment = _UNSAFE.sub("", dam_id.upper())[-8:] or "DAM"
    return f"{prefix}-{season_year}-{dam_fragment}-{uuid4().hex[:6].upper()}"
