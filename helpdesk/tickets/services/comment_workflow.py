"""Comment submission workflow.

Runs Validating -> Authorizing -> Binding -> Recording -> Notifying ->
Logging -> Done. Any AppError raised before the comment is recorded ends the
request in the Failed state with that error's code; nothing but already stored
attachments survives a failure.
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.orm import Session

from helpdesk.audit.services.audit_service import AuditService
from helpdesk.auth.models.user import User
from helpdesk.core.config import settings
from helpdesk.core.constants import AUDIT_COMMENT
from helpdesk.core.exceptions import AppError
from helpdesk.core.storage import get_storage
from helpdesk.tickets.actors import SessionContext
from helpdesk.tickets.models.event import TicketEvent
from helpdesk.tickets.services.actor_resolver import ActorResolver
from helpdesk.tickets.services.attachment_binder import (
    AttachmentBinder,
    UploadedFile,
    UploadScope,
)
from helpdesk.tickets.services.authorizer import CommentAuthorizer
from helpdesk.tickets.services.comment_recorder import CommentRecorder
from helpdesk.tickets.services.notification_dispatcher import (
    NotificationDispatcher,
    Recipient,
)

logger = structlog.get_logger(__name__)


class WorkflowState(str, enum.Enum):
    VALIDATING = "validating"
    AUTHORIZING = "authorizing"
    BINDING = "binding"
    RECORDING = "recording"
    NOTIFYING = "notifying"
    LOGGING = "logging"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CommentResult:
    event: TicketEvent
    notified: Recipient | None


class CommentWorkflow:
    def __init__(
        self,
        *,
        resolver: ActorResolver,
        authorizer: CommentAuthorizer,
        binder: AttachmentBinder,
        recorder: CommentRecorder,
        dispatcher: NotificationDispatcher,
        audit: AuditService,
    ) -> None:
        self.resolver = resolver
        self.authorizer = authorizer
        self.binder = binder
        self.recorder = recorder
        self.dispatcher = dispatcher
        self.audit = audit
        self.state = WorkflowState.VALIDATING

    def submit(
        self,
        form_data: Mapping[str, Any],
        *,
        user: User | None = None,
        session: SessionContext | None = None,
        images: Mapping[int, UploadedFile] | None = None,
        file: UploadedFile | None = None,
    ) -> CommentResult:
        images = images or {}
        try:
            self._enter(WorkflowState.VALIDATING)
            form = self.authorizer.validate_form(form_data)
            actor = self.authorizer.validate_credentials(
                self.resolver.classify(user, session), form
            )
            ticket, context = self.resolver.resolve(actor, form.ticket_number)
            log = logger.bind(ticket_number=ticket.ticket_number, actor=context.kind)

            self._enter(WorkflowState.AUTHORIZING, log)
            self.authorizer.authorize(context, ticket)

            self._enter(WorkflowState.BINDING, log)
            bound = self.binder.bind(
                UploadScope(ticket_number=ticket.ticket_number, staff=context.is_staff),
                form.content,
                [images.get(index) for index in range(form.images)],
                file,
            )

            self._enter(WorkflowState.RECORDING, log)
            event = self.recorder.record(
                ticket,
                context,
                bound.content,
                file_path=bound.file_path,
                private=form.private,
            )
        except AppError as exc:
            self.state = WorkflowState.FAILED
            logger.info("comment_failed", error=exc.error_code)
            raise

        self._enter(WorkflowState.NOTIFYING, log)
        notified = self.dispatcher.dispatch(context, ticket, event.content or "", event.private)

        self._enter(WorkflowState.LOGGING, log)
        self.audit.record(
            AUDIT_COMMENT,
            ticket.ticket_number,
            author_id=context.user.id if context.user is not None else None,
        )

        self._enter(WorkflowState.DONE, log)
        log.info(
            "comment_submitted",
            event_position=event.position,
            notified=notified is not None,
        )
        return CommentResult(event=event, notified=notified)

    def _enter(self, state: WorkflowState, log: Any = logger) -> None:
        self.state = state
        log.debug("comment_workflow_state", state=state.value)


def build_comment_workflow(db: Session) -> CommentWorkflow:
    return CommentWorkflow(
        resolver=ActorResolver(db, user_system_enabled=settings.USER_SYSTEM_ENABLED),
        authorizer=CommentAuthorizer(user_system_enabled=settings.USER_SYSTEM_ENABLED),
        binder=AttachmentBinder(
            get_storage(),
            allow_attachments=settings.ALLOW_ATTACHMENTS,
            max_size_bytes=settings.MAX_FILE_SIZE_MB * 1024 * 1024,
        ),
        recorder=CommentRecorder(db, max_retries=settings.TICKET_WRITE_MAX_RETRIES),
        dispatcher=NotificationDispatcher(
            user_system_enabled=settings.USER_SYSTEM_ENABLED,
            base_url=settings.FRONTEND_URL,
        ),
        audit=AuditService(db),
    )
