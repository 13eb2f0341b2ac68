"""
Profile Models
==============

Long-lived behavioral statistics learned across sessions.

The Profile is the only persisted state in the system. It is stored as a
flat record under a fixed namespace key:

    {
        "visits": 3,
        "avgDensity": 0.21,
        "avgSpeed": 0.018,
        "preferredSize": 0.23,
        "lastSeen": "2026-10-18T09:12:44.120000+00:00"
    }

Ownership Rules:
    - avg_density, avg_speed, preferred_size: written only by ProfileLearner
    - visit_count: incremented once per session start
    - last_seen: stamped by the store on save
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_AVG_DENSITY = 0.2
DEFAULT_AVG_SPEED = 0.02
DEFAULT_PREFERRED_SIZE = 0.22


class Profile(BaseModel):
    """
    Persisted per-user/device behavioral profile.

    Field names are snake_case in Python and camelCase on the wire.
    Unknown keys in a stored record are ignored and missing keys
    take their defaults, so older blobs keep loading.

    Attributes:
        visit_count: Sessions started with this profile
        avg_density: EMA of observed motion density [0, 1]
        avg_speed: EMA of observed centroid speed
        preferred_size: EMA of the settled orb size
        last_seen: When the profile was last saved
    """

    visit_count: int = Field(
        default=0,
        ge=0,
        alias="visits",
        description="Sessions started with this profile",
    )

    avg_density: float = Field(
        default=DEFAULT_AVG_DENSITY,
        ge=0.0,
        le=1.0,
        alias="avgDensity",
        description="EMA of observed motion density",
    )

    avg_speed: float = Field(
        default=DEFAULT_AVG_SPEED,
        ge=0.0,
        alias="avgSpeed",
        description="EMA of observed centroid speed (normalized units/tick)",
    )

    preferred_size: float = Field(
        default=DEFAULT_PREFERRED_SIZE,
        gt=0.0,
        alias="preferredSize",
        description="EMA of the orb's settled size",
    )

    last_seen: Optional[datetime] = Field(
        default=None,
        alias="lastSeen",
        description="Timestamp of the last save",
    )

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True

    def to_record(self) -> dict:
        """Export as the flat wire record (camelCase, lastSeen omitted when unset)."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    def summary(self) -> str:
        """One-line description for logs."""
        return (
            f"Profile: {self.visit_count} visits · "
            f"preferredSize {self.preferred_size:.2f}"
        )
