from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


# Same rule the intake form applies: digits, plus, dash and spaces, 6-20 chars
MOBILE_PATTERN = re.compile(r"^[0-9+\-\s]{6,20}$")

REQUIRED_FIELDS = ("name", "mobile", "location", "department", "product", "serial_number")

FIELD_LABELS = {
    "name": "Name",
    "mobile": "Mobile",
    "location": "Location",
    "department": "Department",
    "product": "Product",
    "serial_number": "Serial Number",
}


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate complaint number)."""


@dataclass(frozen=True)
class ComplaintFields:
    """Trimmed, validated values for the editable text columns of a complaint."""
    name: str
    mobile: str
    location: str
    department: str
    product: str
    serial_number: str
    details: str = ""

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "mobile": self.mobile,
            "location": self.location,
            "department": self.department,
            "product": self.product,
            "serial_number": self.serial_number,
            "details": self.details,
        }


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_complaint_fields(
    *,
    name: Any,
    mobile: Any,
    location: Any,
    department: Any,
    product: Any,
    serial_number: Any,
    details: Any = "",
) -> ComplaintFields:
    """
    Trim every field and enforce the intake rules.

    Required fields are checked in form order so the first message matches
    the field a user would be pointed at.
    """
    raw = {
        "name": name,
        "mobile": mobile,
        "location": location,
        "department": department,
        "product": product,
        "serial_number": serial_number,
    }
    cleaned = {key: _clean_text(value) for key, value in raw.items()}

    for key in REQUIRED_FIELDS:
        if not cleaned[key]:
            raise ValidationError(f"{FIELD_LABELS[key]} is required.")
        if key == "mobile" and not MOBILE_PATTERN.match(cleaned[key]):
            raise ValidationError("Mobile format looks invalid.")

    return ComplaintFields(details=_clean_text(details), **cleaned)
