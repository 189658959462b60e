"""
Catalog and registration models.

Catalog entities mirror the upstream registration API payloads (camelCase on the
wire, snake_case in Python) and are frozen: the engine treats them as a
read-only snapshot for the lifetime of a registration session.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    PARTICIPANT = "PARTICIPANT"

    @property
    def is_staff_or_admin(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.STAFF)


class DayOfWeek(str, Enum):
    """Event days, including the special days around the main week."""

    PRE_OPENING = "PRE_OPENING"
    OPENING_SUNDAY = "OPENING_SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    CLOSING_SUNDAY = "CLOSING_SUNDAY"
    POST_EVENT = "POST_EVENT"

    @property
    def label(self) -> str:
        """Human readable label (e.g. "Opening Sunday")."""
        return self.value.replace("_", " ").title()


class FieldType(str, Enum):
    STRING = "STRING"
    MULTILINE_STRING = "MULTILINE_STRING"
    INTEGER = "INTEGER"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"

    @property
    def is_text(self) -> bool:
        return self in (FieldType.STRING, FieldType.MULTILINE_STRING)

    @property
    def is_numeric(self) -> bool:
        return self in (FieldType.INTEGER, FieldType.NUMBER)


class CatalogModel(BaseModel):
    """Base for wire-compatible, immutable catalog records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class JobCategory(CatalogModel):
    id: str
    name: str
    description: str = ""
    always_required: bool = False
    staff_only: bool = False


class CampingOption(CatalogModel):
    id: str
    name: str
    description: str | None = None
    enabled: bool = True
    work_shifts_required: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("workShiftsRequired", "shiftsRequired", "work_shifts_required")
    )
    job_category_ids: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("jobCategoryIds", "jobCategories", "job_category_ids")
    )
    participant_dues: Decimal = Decimal("0")
    staff_dues: Decimal = Decimal("0")
    max_signups: int = Field(default=0, ge=0)  # 0 = unlimited
    current_registrations: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("currentRegistrations", "currentSignups", "current_registrations"),
    )

    @property
    def is_unlimited(self) -> bool:
        return self.max_signups == 0


class Shift(CatalogModel):
    id: str
    name: str = ""
    day_of_week: DayOfWeek
    start_time: datetime | time
    end_time: datetime | time

    @property
    def label(self) -> str:
        """E.g. "Opening Sunday | 09:00 - 13:00"."""
        return f"{self.day_of_week.label} | {self.start_time:%H:%M} - {self.end_time:%H:%M}"


class Job(CatalogModel):
    id: str
    name: str
    category_id: str
    shift_id: str
    location: str = ""
    max_registrations: int = Field(default=1, ge=0)
    current_registrations: int = Field(default=0, ge=0)


class CustomField(CatalogModel):
    id: str
    camping_option_id: str
    display_name: str
    description: str | None = None
    data_type: FieldType
    required: bool = False
    max_length: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    order: int = 0


class ProfileData(BaseModel):
    """Profile details confirmed during the first registration step."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    state_province: str = ""
    country: str = ""
    playa_name: str = ""
    emergency_contact: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v


class UserAccount(BaseModel):
    """The authenticated user, as issued by the upstream auth service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    id: str
    email: str = ""
    role: UserRole = UserRole.PARTICIPANT
    allow_registration: bool = True
    allow_early_registration: bool = False
    allow_deferred_dues_payment: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: object) -> object:
        # Upstream has used both "staff" and "STAFF"
        return v.upper() if isinstance(v, str) else v

    @property
    def is_staff_or_admin(self) -> bool:
        return self.role.is_staff_or_admin


class SiteConfig(BaseModel):
    """Public site configuration relevant to registration."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    camp_name: str = ""
    registration_year: int | None = None
    registration_open: bool = False
    early_registration_open: bool = False
    allow_deferred_dues_payment: bool = False
    stripe_enabled: bool = False
    paypal_enabled: bool = False
    registration_terms: str | None = None
