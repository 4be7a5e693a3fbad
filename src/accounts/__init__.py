"""Customer accounts and entitlement."""

from accounts.service import AccountService, Registration

__all__ = ["AccountService", "Registration"]
