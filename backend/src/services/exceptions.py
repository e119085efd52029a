"""
Custom exceptions for service layer.

Not-found outcomes of the public event operations are plain return values
(None or False); these exceptions are used inside a unit of work to abort
it and roll back the writes already made.
"""


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")
