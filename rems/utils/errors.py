"""Error handling utilities."""

from typing import Optional
from pydantic import ValidationError


class RemsError(Exception):
    """Base exception for REMS backend."""
    pass


class SupabaseError(RemsError):
    """Supabase operation error."""
    pass


class NotFoundError(RemsError):
    """Requested row does not exist (or was already deleted)."""

    def __init__(self, table: str, row_id: Optional[str] = None):
        self.table = table
        self.row_id = row_id
        super().__init__(f"{table} row not found: {row_id}")


class AuthenticationError(RemsError):
    """No authenticated user for an operation that requires one."""
    pass


class AuthorizationError(RemsError):
    """Authenticated user lacks the role or ownership required."""
    pass


class FormValidationError(RemsError):
    """Form input rejected before reaching the data store."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


def form_error(exc: ValidationError) -> FormValidationError:
    """Turn the first pydantic error into an inline form message."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return FormValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg"), field=field)
