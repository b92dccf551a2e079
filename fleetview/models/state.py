from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class PollState(BaseModel):
    """The (data, error, is_loading) triple a poller publishes."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    data: Any = None
    error: str | None = None
    is_loading: bool = False
    generation: int = 0
    updated_at: datetime | None = None

    @property
    def has_data(self) -> bool:
        return self.data is not None
