# app/main.py
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.settings import MailConfigError, settings
from app.routers.contact import invalid_body_handler, is_contact_api, mail_config_handler
from app.routers.contact import router as contact_router
from app.routers.health import router as health_router
from app.routers.pages import router as pages_router

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Only the contact API answers bad bodies with the JSON envelope
@app.exception_handler(RequestValidationError)
async def on_invalid_request(request: Request, exc: RequestValidationError):
    if is_contact_api(request):
        return await invalid_body_handler(request, exc)
    return await request_validation_exception_handler(request, exc)


# Raised only by the contact API's dependencies; the page route handles its own
app.add_exception_handler(MailConfigError, mail_config_handler)

# Routers
app.include_router(contact_router)
app.include_router(pages_router)
app.include_router(health_router)

logging.getLogger("uvicorn.error").info(f"[main] {settings.api_title} ready")
