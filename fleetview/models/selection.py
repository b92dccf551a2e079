from __future__ import annotations

from pydantic import BaseModel

from fleetview.models.time_range import DEFAULT_TIME_RANGE, TimeRange


class Selection(BaseModel):
    """Immutable view of the selection store at one point in time."""

    model_config = {"frozen": True}

    hostname: str | None = None
    time_range: TimeRange = DEFAULT_TIME_RANGE
