"""
Request-scoped data models for a job-application submission.
"""
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_PROVIDED = "Not provided"

# (form field, caption) in render order: two ID sides, then three selfies
FILE_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("idFileFront", "NID Card (Front)"),
    ("idFileBack", "NID Card (Back)"),
    ("selfie1", "Selfie 1"),
    ("selfie2", "Selfie 2"),
    ("selfie3", "Selfie 3"),
)
FILE_FIELDS: Tuple[str, ...] = tuple(name for name, _ in FILE_SLOTS)

REQUIRED_TEXT_FIELDS: Tuple[str, ...] = (
    "firstName", "lastName", "applyingPosition", "email", "dateOfBirth", "phoneNumber",
)
OPTIONAL_TEXT_FIELDS: Tuple[str, ...] = (
    "mobileNumber", "addressLine1", "city", "zipCode", "country",
)
TEXT_FIELDS: Tuple[str, ...] = REQUIRED_TEXT_FIELDS + OPTIONAL_TEXT_FIELDS


@dataclass
class UploadedFile:
    """One uploaded image held in memory for the lifetime of a request."""
    field_name: str
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def caption(self) -> str:
        return dict(FILE_SLOTS).get(self.field_name, self.field_name)


class ApplicationSubmission(BaseModel):
    """Applicant text fields. Required fields must be non-empty; optional ones fall back to NOT_PROVIDED."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    applying_position: str = Field(..., alias="applyingPosition", min_length=1)
    email: str = Field(..., alias="email", min_length=1)
    date_of_birth: str = Field(..., alias="dateOfBirth", min_length=1)
    phone_number: str = Field(..., alias="phoneNumber", min_length=1)
    mobile_number: Optional[str] = Field(None, alias="mobileNumber")
    address_line1: Optional[str] = Field(None, alias="addressLine1")
    city: Optional[str] = Field(None, alias="city")
    zip_code: Optional[str] = Field(None, alias="zipCode")
    country: Optional[str] = Field(None, alias="country")

    @field_validator("mobile_number", "address_line1", "city", "zip_code", "country", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def pdf_filename(self) -> str:
        return f"Application_{self.first_name}_{self.last_name}.pdf"

    def detail_rows(self) -> List[Tuple[str, str]]:
        """Label/value pairs in display order, with absent optional values shown as NOT_PROVIDED."""
        return [
            ("First Name", self.first_name),
            ("Last Name", self.last_name),
            ("Applying Position", self.applying_position),
            ("Email", self.email),
            ("Date of Birth", self.date_of_birth),
            ("Phone Number", self.phone_number),
            ("Mobile Number", self.mobile_number or NOT_PROVIDED),
            ("Address Line 1", self.address_line1 or NOT_PROVIDED),
            ("City", self.city or NOT_PROVIDED),
            ("Zip Code", self.zip_code or NOT_PROVIDED),
            ("Country", self.country or NOT_PROVIDED),
        ]


def uploads_in_slot_order(uploads: Mapping[str, UploadedFile]) -> List[UploadedFile]:
    return [uploads[name] for name in FILE_FIELDS]
