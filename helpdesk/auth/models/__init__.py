from helpdesk.auth.models.user import Department, User, UserRole

__all__ = ["Department", "User", "UserRole"]
