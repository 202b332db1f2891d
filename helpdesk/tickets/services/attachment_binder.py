import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from helpdesk.core.constants import (
    COMMENT_IMAGE_MIME_TYPES,
    IMAGE_PLACEHOLDER_PREFIX,
    TICKET_FILE_MIME_TYPES,
    TICKET_UPLOAD_FOLDER,
)
from helpdesk.core.exceptions import ErrorKind, RequestError
from helpdesk.core.storage import StorageBackend, generate_unique_filename

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(re.escape(IMAGE_PLACEHOLDER_PREFIX) + r"(\d+)")


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class UploadScope:
    """Where uploads for one comment go and whose upload rules apply."""

    ticket_number: str
    staff: bool

    @property
    def folder(self) -> str:
        return f"{TICKET_UPLOAD_FOLDER}/{self.ticket_number}"


@dataclass
class BoundAttachments:
    content: str
    file_path: str | None = None
    image_urls: list[str] = field(default_factory=list)


def replace_image_placeholders(content: str, image_urls: Sequence[str]) -> str:
    """Swap IMAGE_PATH_<i> for the URL of uploaded image i.

    Placeholders pointing past the uploaded images are left as they are.
    """

    def _substitute(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(image_urls):
            return image_urls[index]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_substitute, content)


class AttachmentBinder:
    """Stores comment uploads and links stored images into the comment text.

    Files are written before the ticket transaction; a later failure leaves
    them orphaned in storage rather than rolling them back.
    """

    def __init__(
        self, storage: StorageBackend, *, allow_attachments: bool, max_size_bytes: int
    ) -> None:
        self.storage = storage
        self.allow_attachments = allow_attachments
        self.max_size_bytes = max_size_bytes

    def bind(
        self,
        scope: UploadScope,
        content: str,
        images: Sequence[UploadedFile | None],
        file: UploadedFile | None,
    ) -> BoundAttachments:
        if not self._uploads_allowed(scope):
            if images or file is not None:
                logger.info("Attachments disabled, ignoring uploads for %s", scope.ticket_number)
            return BoundAttachments(content=content)

        image_urls = [
            self.storage.download_url(self._store(scope, image, COMMENT_IMAGE_MIME_TYPES))
            for image in images
        ]
        file_path = self._store(scope, file, TICKET_FILE_MIME_TYPES) if file is not None else None

        return BoundAttachments(
            content=replace_image_placeholders(content, image_urls),
            file_path=file_path,
            image_urls=image_urls,
        )

    def _uploads_allowed(self, scope: UploadScope) -> bool:
        return self.allow_attachments or scope.staff

    def _store(
        self, scope: UploadScope, upload: UploadedFile | None, allowed_types: Sequence[str]
    ) -> str:
        if upload is None:
            raise RequestError(ErrorKind.INVALID_FILE)
        if upload.content_type not in allowed_types:
            logger.info("Rejected upload %s of type %s", upload.filename, upload.content_type)
            raise RequestError(ErrorKind.INVALID_FILE)
        if not upload.content or len(upload.content) > self.max_size_bytes:
            logger.info("Rejected upload %s of %d bytes", upload.filename, len(upload.content))
            raise RequestError(ErrorKind.INVALID_FILE)

        unique_filename = generate_unique_filename(upload.filename or "file.bin")
        return self.storage.upload(
            upload.content, scope.folder, unique_filename, content_type=upload.content_type
        )
