# app/routers/pages.py
import logging

from fastapi import APIRouter, Form
from fastapi.responses import HTMLResponse

from app.client.form import ContactForm
from app.core.mailer import get_mail_transport
from app.core.settings import MailConfigError, get_mail_settings, settings
from app.lib.validation import ContactSubmission
from app.routers.contact import deliver_submission

router = APIRouter(tags=["pages"])
log = logging.getLogger("uvicorn.error")


def _page(form: ContactForm, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(form.render_page(title=settings.page_title), status_code=status_code)


@router.get("/", response_class=HTMLResponse)
async def contact_page():
    return _page(ContactForm())


@router.post("/", response_class=HTMLResponse)
async def submit_contact_page(
    name: str = Form(""),
    email: str = Form(""),
    subject: str = Form(""),
    message: str = Form(""),
):
    payload = ContactSubmission(name=name, email=email, subject=subject, message=message)
    form = ContactForm()
    for field, value in payload.model_dump().items():
        form.set_value(field, value)
    if form.validate():
        return _page(form, 400)

    # resolved here rather than via Depends so a config error still renders the entered values
    try:
        mail = get_mail_settings()
    except MailConfigError as exc:
        log.error(f"[pages] {exc}")
        form.settle(False)
        return _page(form, 500)

    status_code, _, _ = await deliver_submission(payload, mail, get_mail_transport(mail))
    form.settle(status_code == 200)
    return _page(form, status_code)
