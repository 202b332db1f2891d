"""
Database base module - imports all models for Alembic migration detection.

This module imports all SQLAlchemy models to ensure they are registered
with Alembic for automatic migration generation. While the imports appear
unused, they are essential for the migration system to work properly.
"""

from helpdesk.audit.models.activity_log import ActivityLog
from helpdesk.auth.models.user import Department, User
from helpdesk.tickets.models.event import TicketEvent
from helpdesk.tickets.models.ticket import Ticket

# Export all models for Alembic
__all__ = [
    "ActivityLog",
    "Department",
    "User",
    "Ticket",
    "TicketEvent",
]
