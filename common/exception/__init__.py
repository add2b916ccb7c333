from common.exception.exceptions import GatewayError, NoImageDataError, NotFoundError

__all__ = ["GatewayError", "NoImageDataError", "NotFoundError"]
