import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.client.api import SUBMIT_TIMEOUT_SECONDS, ContactApiClient, SubmissionError
from app.client.cancel import CancelToken
from app.lib.validation import CONTACT_FIELDS, FieldValidationError, validate_field, validate_submission

log = logging.getLogger(__name__)

_templates = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html", "xml"]),
)

ERROR_BANNER = "Oops, there was an error sending your email. Please try again."
SUCCESS_BANNER = "Your message was sent successfully."


class FormStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUBMITTED = "submitted"
    ERROR = "error"


class ContactForm:
    """State behind the contact page: field values, inline errors and status.

    Fields validate on blur and again on submit. A submit that passes
    validation issues exactly one request, abandoned after ``timeout``
    seconds.
    """

    def __init__(self, api: Optional[ContactApiClient] = None, timeout: float = SUBMIT_TIMEOUT_SECONDS):
        self.api = api
        self.timeout = timeout
        self.status = FormStatus.IDLE
        self.values: Dict[str, str] = {f: "" for f in CONTACT_FIELDS}
        self.errors: Dict[str, FieldValidationError] = {}
        self.touched: Set[str] = set()

    def set_value(self, field: str, value: str) -> None:
        if field not in self.values:
            raise KeyError(f"unknown contact field: {field}")
        self.values[field] = value

    def blur(self, field: str) -> Optional[FieldValidationError]:
        self.touched.add(field)
        err = validate_field(field, self.values.get(field))
        if err is None:
            self.errors.pop(field, None)
        else:
            self.errors[field] = err
        return err

    def validate(self) -> Dict[str, FieldValidationError]:
        self.touched.update(CONTACT_FIELDS)
        self.errors = validate_submission(self.values)
        return self.errors

    def reset(self) -> None:
        self.values = {f: "" for f in CONTACT_FIELDS}
        self.errors = {}
        self.touched = set()

    @property
    def submit_disabled(self) -> bool:
        return self.status is FormStatus.LOADING

    @property
    def submit_label(self) -> str:
        return "Sending..." if self.submit_disabled else "Send Message"

    @property
    def banner(self) -> Optional[Tuple[str, str]]:
        if self.status is FormStatus.ERROR:
            return "danger", ERROR_BANNER
        if self.status is FormStatus.SUBMITTED:
            return "success", SUCCESS_BANNER
        return None

    async def submit(self) -> FormStatus:
        if self.status is FormStatus.LOADING:
            return self.status
        if self.validate():
            return self.status

        if self.api is None:
            raise RuntimeError("contact form has no api client to submit with")

        self.status = FormStatus.LOADING
        cancel = CancelToken().cancel_after(self.timeout)
        try:
            await self.api.send(self.values, cancel)
        except SubmissionError as exc:
            log.info(f"[contact-form] submission failed: {exc}")
            self.settle(False)
        else:
            self.settle(True)
        finally:
            cancel.disarm()
            # never leave the submit control disabled
            if self.status is FormStatus.LOADING:
                self.status = FormStatus.ERROR
        return self.status

    def settle(self, sent: bool) -> None:
        if sent:
            self.status = FormStatus.SUBMITTED
            self.reset()
        else:
            self.status = FormStatus.ERROR

    def render(self, action: str = "/") -> str:
        return _templates.get_template("contact_form.html").render(form=self, action=action)

    def render_page(self, title: str = "Contact", action: str = "/") -> str:
        return _templates.get_template("contact_page.html").render(form=self, action=action, title=title)
