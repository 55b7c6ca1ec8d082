"""Entry domain model — one dated diary record.

Entries are loaded once from static JSON files and never mutated.
The on-disk shape is also the output contract of the generation job.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Entry(BaseModel):
    """A dated diary entry written by Meridian."""

    model_config = ConfigDict(frozen=True)

    date: str
    title: str = Field(min_length=1)
    subtitle: str = ""
    body: str
    tags: list[str] = Field(default_factory=list)
    mood: str = ""

    @field_validator("date")
    @classmethod
    def _check_iso_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value

    @field_validator("subtitle", "mood", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_to_list(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def day(self) -> date:
        """The entry date as a :class:`datetime.date`."""
        return date.fromisoformat(self.date)

    @property
    def word_count(self) -> int:
        return len(self.body.split())
