"""Contact models read from the external contact store.

Two projections of the same ``persons`` row:

- :class:`ContactSummary`: the fields the garden layout needs.
- :class:`ContactRecord`: the superset the duplicate detector and merge
  planner work on.

Both are frozen and validate leniently. The snapshot comes from a store
this package does not own, so a malformed value degrades to "unknown"
(``None``) instead of rejecting the whole row. Only ``id`` and ``name`` are
hard requirements.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from rememberme.domain.types import Importance

DEFAULT_TARGET_DAYS = 30


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Best-effort timestamp parsing; anything unparseable becomes ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return to_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class ContactSummary(BaseModel):
    """Read-only projection of a contact consumed by the garden layout."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    last_interaction_date: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "last_interaction_date",
            "lastInteractionDate",
            "last_contact",
            "lastContact",
        ),
    )
    target_frequency_days: int | None = None
    importance: Importance | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return _blank_to_none(value)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("last_interaction_date", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("target_frequency_days", mode="before")
    @classmethod
    def _positive_cadence(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            days = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return days if days > 0 else None

    @field_validator("importance", mode="before")
    @classmethod
    def _known_importance(cls, value: Any) -> Importance | None:
        if not isinstance(value, str):
            return None
        try:
            return Importance(value.strip().lower())
        except ValueError:
            return None

    @property
    def cadence_days(self) -> int:
        """Target cadence with the 30-day default applied."""
        return self.target_frequency_days or DEFAULT_TARGET_DAYS

    def days_since_contact(self, as_of: datetime) -> int | None:
        """Calendar days between the last interaction and *as_of*.

        ``None`` means never contacted. Future-dated interactions yield a
        negative count, which the classifiers treat as malformed.
        """
        if self.last_interaction_date is None:
            return None
        return (to_utc(as_of).date() - self.last_interaction_date.date()).days


class ContactRecord(ContactSummary):
    """Full contact row used for duplicate detection and merge planning."""

    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    job_title: str | None = None
    linkedin: str | None = None
    birthday: str | None = None
    photo_url: str | None = None
    where_met: str | None = None
    notes: str | None = None
    family_notes: str | None = None
    relationship_summary: str | None = None
    interests: list[str] = Field(default_factory=list)
    interaction_count: int = 0
    created_at: datetime | None = None

    @field_validator(
        "email",
        "phone",
        "first_name",
        "last_name",
        "company",
        "job_title",
        "linkedin",
        "birthday",
        "photo_url",
        "where_met",
        "notes",
        "family_notes",
        "relationship_summary",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            value = str(value)
        return _blank_to_none(value)

    @field_validator("interests", mode="before")
    @classmethod
    def _interest_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return []
        return [str(v).strip() for v in value if str(v).strip()]

    @field_validator("interaction_count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        try:
            return max(0, int(value))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("created_at", mode="before")
    @classmethod
    def _lenient_created(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    def filled_field_count(self) -> int:
        """Number of non-empty optional fields (data completeness)."""
        count = 0
        for name in MERGEABLE_FIELDS:
            value = getattr(self, name)
            if value not in (None, "", []):
                count += 1
        return count


# Fields the merge planner reasons about, in display order. ``id``, ``created_at`` and
# ``interaction_count`` belong to the store and are never merged.
MERGEABLE_FIELDS: tuple[str, ...] = (
    "name",
    "first_name",
    "last_name",
    "email",
    "phone",
    "company",
    "job_title",
    "linkedin",
    "birthday",
    "photo_url",
    "where_met",
    "importance",
    "target_frequency_days",
    "last_interaction_date",
    "interests",
    "notes",
    "family_notes",
    "relationship_summary",
)
