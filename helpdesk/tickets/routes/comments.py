import re
from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from helpdesk.auth.dependencies import get_optional_user
from helpdesk.auth.models.user import User
from helpdesk.core.config import settings
from helpdesk.core.rate_limit import limiter
from helpdesk.core.schemas import ApiResponse, EmptyData, success_response
from helpdesk.tickets.actors import SessionContext
from helpdesk.tickets.dependencies import get_comment_workflow, get_session_context
from helpdesk.tickets.services.attachment_binder import UploadedFile
from helpdesk.tickets.services.comment_workflow import CommentWorkflow

router = APIRouter()

_FORM_FIELDS = ("content", "ticketNumber", "private", "images", "csrf_token")
_IMAGE_FIELD_RE = re.compile(r"image_(\d+)")


async def _read_upload(upload: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        content=await upload.read(),
    )


def _is_upload(value: Any) -> bool:
    return isinstance(value, UploadFile) and bool(value.filename)


async def _collect_images(form: FormData) -> dict[int, UploadedFile]:
    images: dict[int, UploadedFile] = {}
    for key, value in form.multi_items():
        match = _IMAGE_FIELD_RE.fullmatch(key)
        if match and _is_upload(value):
            images[int(match.group(1))] = await _read_upload(value)
    return images


@router.post("/ticket/comment", response_model=ApiResponse[EmptyData])
@limiter.limit(settings.COMMENT_RATE_LIMIT)
async def add_comment(
    request: Request,
    current_user: User | None = Depends(get_optional_user),
    ticket_session: SessionContext | None = Depends(get_session_context),
    workflow: CommentWorkflow = Depends(get_comment_workflow),
) -> ApiResponse[EmptyData]:
    """Add a comment to a ticket.

    Multipart fields: content, ticketNumber, private, images (count of
    image_<i> parts), csrf_token (guests only), plus the optional
    image_0..image_<n-1> and file uploads.
    """
    form = await request.form()
    form_data = {
        name: form.get(name) for name in _FORM_FIELDS if isinstance(form.get(name), str)
    }
    images = await _collect_images(form)
    upload = form.get("file")
    file = await _read_upload(upload) if _is_upload(upload) else None

    await run_in_threadpool(
        workflow.submit,
        form_data,
        user=current_user,
        session=ticket_session,
        images=images,
        file=file,
    )
    return success_response(EmptyData())
