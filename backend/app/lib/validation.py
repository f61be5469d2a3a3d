import re
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

CONTACT_FIELDS = ("name", "email", "subject", "message")

# Same rule on both sides of the wire; fullmatch so a trailing newline fails.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELD_MSG = "This field is required"
INVALID_EMAIL_MSG = "A valid email address is required. Example: name@domain.com."
SINGLE_LINE_MSG = "The subject must fit on one line."


class FieldValidationError(ValueError):
    default_message = "Invalid value"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        self.message = message or self.default_message
        super().__init__(f"{field}: {self.message}")

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "type": type(self).__name__, "message": self.message}


class RequiredFieldError(FieldValidationError):
    default_message = REQUIRED_FIELD_MSG


class InvalidFormatError(FieldValidationError):
    default_message = INVALID_EMAIL_MSG


def validate_field(field: str, value: Any) -> Optional[FieldValidationError]:
    if field not in CONTACT_FIELDS:
        raise KeyError(f"unknown contact field: {field}")
    if value is None or value == "":
        return RequiredFieldError(field)
    if field == "email" and not EMAIL_PATTERN.fullmatch(str(value)):
        return InvalidFormatError(field)
    # subject becomes a mail header
    if field == "subject" and ("\r" in str(value) or "\n" in str(value)):
        return InvalidFormatError(field, SINGLE_LINE_MSG)
    return None


def validate_submission(data: Mapping[str, Any]) -> Dict[str, FieldValidationError]:
    """Check every contact field, returning errors keyed by field name.

    An empty dict means the submission may be sent.
    """
    errors: Dict[str, FieldValidationError] = {}
    for field in CONTACT_FIELDS:
        err = validate_field(field, data.get(field))
        if err is not None:
            errors[field] = err
    return errors


class ContactSubmission(BaseModel):
    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""

    def field_errors(self) -> Dict[str, FieldValidationError]:
        return validate_submission(self.model_dump())
