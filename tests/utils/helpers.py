from typing import Any

import httpx

from helpdesk.core.security import create_access_token
from helpdesk.tickets.services.attachment_binder import UploadedFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def comment_form(ticket_number: str, content: str | None = None, **extra: Any) -> dict[str, Any]:
    form: dict[str, Any] = {
        "content": content if content is not None else "This is a sufficiently long comment body.",
        "ticketNumber": ticket_number,
    }
    form.update(extra)
    return form


def png_upload(name: str = "screenshot.png") -> UploadedFile:
    return UploadedFile(filename=name, content_type="image/png", content=PNG_BYTES)


def assert_error_response(response: httpx.Response, code: str, status_code: int = 400) -> None:
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code


def make_access_token(user: Any) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})
