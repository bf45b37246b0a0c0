"""Memory model — one dated entry in a couple's shared timeline.

A Memory is the unit everything else works on: the map clusters them, the
time machine buckets them, the calendar lists their dates.  Only `id`,
`date` and `location` carry meaning for that logic; everything else is
payload passed through untouched.

Memory itself does not validate `date` or coordinates.  Strict validation
happens at the boundary in MemoryDraft / MemoryUpdate.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from memory_lane.foundation.clock import utc_now

# Suggestions offered by the client; custom tags are equally valid.
PREDEFINED_ACTIVITY_TAGS: tuple[str, ...] = (
    "Travel", "Hiking", "Beach", "Dinner", "Lunch", "Brunch",
    "Party", "Concert", "Movie", "Date Night", "Family", "Friends",
    "Birthday", "Anniversary", "Wedding", "Road Trip", "Camping",
    "Sports", "Gym", "Relaxing", "Work", "Study", "Shopping",
)


# ── Location ─────────────────────────────────────────────────────────────────

class Location(BaseModel):
    """A geotag in decimal degrees (WGS84)."""

    lat: float = Field(..., description="Latitude in decimal degrees")
    lng: float = Field(..., description="Longitude in decimal degrees")
    address: str = Field(default="", max_length=512, description="Human-readable address")
    place_id: Optional[str] = Field(default=None, description="Map provider place identifier")
    place_name: Optional[str] = Field(default=None, max_length=256, description="Short name, e.g. 'Marine Drive'")

    model_config = {"frozen": True}


# ── Memory ───────────────────────────────────────────────────────────────────

class Memory(BaseModel):
    """A stored memory.  Immutable; updates produce a new instance."""

    id: str = Field(..., min_length=1)
    date: str = Field(..., description="Calendar day as YYYY-MM-DD (string-sortable)")
    title: str = ""
    caption: str = ""
    notes: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    location: Optional[Location] = None
    activity_tags: list[str] = Field(default_factory=list)
    owner_id: str = Field(default="", description="Couple id when partnered, otherwise the author's user id")
    author_id: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    @property
    def is_located(self) -> bool:
        return self.location is not None


# ── Boundary models ──────────────────────────────────────────────────────────

def _check_iso_date(value: str) -> str:
    if len(value) != 10 or value[4] != "-" or value[7] != "-":
        raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
    date_type.fromisoformat(value)
    return value


def _clean_tags(tags: list[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class MemoryDraft(BaseModel):
    """Client input for creating a memory."""

    date: str = Field(..., description="Calendar day as YYYY-MM-DD")
    title: str = Field(..., min_length=1, max_length=200)
    caption: str = Field(default="", max_length=2000)
    notes: list[str] = Field(default_factory=list, max_length=50)
    image_urls: list[str] = Field(default_factory=list, max_length=20)
    location: Optional[Location] = None
    activity_tags: list[str] = Field(default_factory=list, max_length=30)

    @field_validator("date")
    @classmethod
    def date_must_be_iso(cls, v: str) -> str:
        return _check_iso_date(v)

    @field_validator("activity_tags")
    @classmethod
    def tags_are_cleaned(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class MemoryUpdate(BaseModel):
    """Partial update.  Only fields explicitly sent are applied."""

    date: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    caption: Optional[str] = Field(default=None, max_length=2000)
    notes: Optional[list[str]] = Field(default=None, max_length=50)
    image_urls: Optional[list[str]] = Field(default=None, max_length=20)
    location: Optional[Location] = None
    activity_tags: Optional[list[str]] = Field(default=None, max_length=30)

    @field_validator("date")
    @classmethod
    def date_must_be_iso(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_iso_date(v)

    @field_validator("activity_tags")
    @classmethod
    def tags_are_cleaned(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return None if v is None else _clean_tags(v)

    def changes(self) -> dict:
        """Fields the client actually sent, ready to merge into a Memory.

        An explicit null only means something for location (remove the geotag).
        """
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "location"}
