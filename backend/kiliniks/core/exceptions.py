"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.
"""


class NotFoundError(Exception):
    """
    Raised by the service layer when a use case needs an existing entity
    and the repository reported none.
    """

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationError(ValueError):
    """Malformed input rejected at the HTTP boundary."""

    pass


class NotificationError(Exception):
    """
    Raised by event publishers when an event could not be delivered.
    Services log it and carry on.
    """

    pass
