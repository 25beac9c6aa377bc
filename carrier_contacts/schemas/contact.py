from enum import StrEnum

from pydantic import BaseModel, Field


class InvalidReason(StrEnum):
    not_found = "not_found"
    inactive = "inactive"
    zero_power_units = "zero_power_units"


class ValidityVerdict(BaseModel):
    valid: bool
    reason: InvalidReason | None = None


class ContactRecord(BaseModel):
    email: str = ""
    registry_number: str = Field(default="", serialization_alias="registryNumber")
    phone: str = ""
    source_url: str = Field(default="", serialization_alias="sourceURL")


class OutcomeStatus(StrEnum):
    valid = "valid"
    invalid = "invalid"
    error = "error"


class LookupOutcome(BaseModel):
    identifier: str
    status: OutcomeStatus
    url: str
    verdict: ValidityVerdict | None = None
    record: ContactRecord | None = None
    error: str | None = None
