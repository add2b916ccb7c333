"""Domain exceptions raised by the store and the model gateway."""


class NotFoundError(Exception):
    """Raised when a conversation is absent or not owned by the caller."""

    def __init__(self, resource: str = "Conversation", resource_id=None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class GatewayError(Exception):
    """Raised when a call to the remote model provider fails."""


class NoImageDataError(GatewayError):
    """Raised when an image generation response carries no image part."""
