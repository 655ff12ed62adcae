from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ProbeResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
