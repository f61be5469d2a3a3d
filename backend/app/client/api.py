import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from app.client.cancel import CancelToken

log = logging.getLogger(__name__)

CONTACT_PATH = "/api/contact"
SUBMIT_TIMEOUT_SECONDS = 7.0

# InvalidURL and CookieConflict sit outside httpx.HTTPError
NETWORK_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.CookieConflict)


class SubmissionError(Exception):
    pass


class RequestAborted(SubmissionError):
    pass


class SubmissionFailed(SubmissionError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Whoops! Error sending email. (HTTP {status_code})")


class ContactApiClient:
    def __init__(self, base_url: str = "http://localhost:8000", transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self._transport = transport

    async def send(self, data: Mapping[str, Any], cancel: CancelToken) -> Dict[str, Any]:
        """POST the contact fields and return the decoded JSON body.

        Raises RequestAborted when ``cancel`` fires first, SubmissionFailed on
        a non-2xx reply, and SubmissionError for transport or decoding errors.
        """
        try:
            # timeout=None: the cancel token is the only deadline
            async with httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=None) as client:
                request = asyncio.ensure_future(client.post(CONTACT_PATH, json=dict(data)))
                aborted = asyncio.ensure_future(cancel.wait())
                try:
                    await asyncio.wait({request, aborted}, return_when=asyncio.FIRST_COMPLETED)
                except asyncio.CancelledError:
                    request.cancel()
                    raise
                finally:
                    aborted.cancel()

                if not request.done():
                    request.cancel()
                    await asyncio.gather(request, return_exceptions=True)
                    log.warning(f"[contact-client] request aborted: {cancel.reason}")
                    raise RequestAborted(cancel.reason or "cancelled")

                response = request.result()
        except NETWORK_ERRORS as exc:
            log.warning(f"[contact-client] network error: {exc!r}")
            raise SubmissionError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise SubmissionFailed(response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise SubmissionError("response body is not JSON") from exc
