import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.mailer import MailTransport, MailTransportError, build_contact_message, get_mail_transport
from app.core.settings import MailConfigError, MailSettings, get_mail_settings
from app.lib.validation import ContactSubmission

router = APIRouter(prefix="/api", tags=["contact"])
log = logging.getLogger("uvicorn.error")


def contact_result(status_code: int, errors: List[Any], response: Optional[Any] = None) -> JSONResponse:
    sent = status_code == 200
    body: Dict[str, Any] = {"error": not sent, "emailSent": sent, "errors": errors}
    if response is not None:
        body["response"] = response
    return JSONResponse(status_code=status_code, content=body)


async def deliver_submission(
    payload: ContactSubmission, mail: MailSettings, transport: MailTransport
) -> Tuple[int, List[Any], Optional[Any]]:
    """Validate and send one submission; returns (status_code, errors, response)."""
    problems = payload.field_errors()
    if problems:
        return 400, [err.to_dict() for err in problems.values()], None

    message = build_contact_message(payload, mail.send_to)
    try:
        response = await transport.send(message)
    except MailTransportError as exc:
        log.error(f"[contact] email from {payload.email} failed: {exc}")
        return 500, [exc.detail], None

    return 200, [], response


@router.post("/contact")
async def contact(
    payload: ContactSubmission,
    mail: MailSettings = Depends(get_mail_settings),
    transport: MailTransport = Depends(get_mail_transport),
):
    return contact_result(*await deliver_submission(payload, mail, transport))


def is_contact_api(request: Request) -> bool:
    return request.url.path.startswith(router.prefix + "/contact")


async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body",
            "type": err.get("type", "value_error"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return contact_result(400, errors)


async def mail_config_handler(request: Request, exc: MailConfigError) -> JSONResponse:
    log.error(f"[contact] {exc}")
    return contact_result(500, [mail_config_detail(exc)])


def mail_config_detail(exc: MailConfigError) -> Dict[str, Any]:
    return {"type": "MailConfigError", "message": str(exc), "code": None}
