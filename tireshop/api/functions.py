"""HTTP surface for the email notification functions.

Mirrors the hosted-function convention: ``POST /functions/v1/{name}`` with a
JSON body, status code and JSON body passed through from the handler.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tireshop.api.deps import get_email_sender
from tireshop.services.email import EmailSender
from tireshop.services.notifications import invoke_function

router = APIRouter(prefix="/functions/v1")


@router.post("/{name}")
async def call_function(
    name: str,
    request: Request,
    sender: Annotated[EmailSender, Depends(get_email_sender)],
):
    try:
        body: Any = await request.json()
    except ValueError:
        body = None
    response = await invoke_function(name, body, sender)
    return JSONResponse(status_code=response.status_code, content=response.body)
