"""Application-wide constants.

This module centralizes magic numbers and configuration constants
that are used across multiple modules. For environment-specific
configuration, see config.py.
"""

# =============================================================================
# Content Limits
# =============================================================================

# Comment body length, inclusive on both ends
COMMENT_MIN_LENGTH: int = 20
COMMENT_MAX_LENGTH: int = 5000

# Images uploaded with a comment are referenced from its content as
# IMAGE_PATH_0, IMAGE_PATH_1, ... in upload order.
IMAGE_PLACEHOLDER_PREFIX: str = "IMAGE_PATH_"

# Upper bound for the "images" form field
MAX_IMAGES_PER_COMMENT: int = 20

# =============================================================================
# Allowed MIME Types
# =============================================================================

# Inline comment images
COMMENT_IMAGE_MIME_TYPES: tuple[str, ...] = (
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
)

# General ticket attachment
TICKET_FILE_MIME_TYPES: tuple[str, ...] = (
    *COMMENT_IMAGE_MIME_TYPES,
    "application/pdf",
    "application/zip",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

# =============================================================================
# Storage
# =============================================================================

# Folder prefix for files attached to a ticket; the ticket number follows
TICKET_UPLOAD_FOLDER: str = "tickets"

# =============================================================================
# Frontend URL Paths
# =============================================================================
# Note: These are paths relative to FRONTEND_URL from config.py

# Guest deep link, followed by /<ticket number>/<email>
CHECK_TICKET_PATH: str = "/check-ticket"

# =============================================================================
# Audit Log
# =============================================================================

AUDIT_COMMENT: str = "COMMENT"
