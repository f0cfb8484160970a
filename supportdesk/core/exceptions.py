# supportdesk/core/exceptions.py
"""Errors shared by the ticket service and the API client."""


class SupportDeskError(Exception):
    """Base class. `message` is safe to show to a user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SupportDeskError):
    pass


class NotFoundError(SupportDeskError):
    pass
