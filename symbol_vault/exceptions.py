"""
Error taxonomy for Symbol Vault.

Every error carries a stable machine-checkable `kind` and a human-readable
`message`. The API layer maps `kind` to an HTTP status code; nothing from the
underlying driver is ever put in the message.
"""


class VaultError(Exception):
    """Base exception for all service errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class InvalidRequest(VaultError):
    """Malformed, missing or out-of-range input. Raised before any store access."""

    kind = "invalid_request"
    status_code = 400


class InvalidCredentials(VaultError):
    """Unknown user, wrong password, or a bad/expired token."""

    kind = "invalid_credentials"
    status_code = 401


class NotFound(VaultError):
    """A well-formed identity with no matching row."""

    kind = "not_found"
    status_code = 404


class Conflict(VaultError):
    """Unique-constraint race, e.g. a duplicate username."""

    kind = "conflict"
    status_code = 409


class StorageFailure(VaultError):
    """The database or object store failed; the operation was not applied."""

    kind = "storage_failure"
    status_code = 500
