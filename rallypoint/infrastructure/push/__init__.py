"""Push delivery gateways."""

from .base import PushGateway, PushGatewayError
from .expo import EXPO_MAX_BATCH_SIZE, ExpoPushGateway, classify_expo_error

__all__ = [
    "PushGateway",
    "PushGatewayError",
    "ExpoPushGateway",
    "EXPO_MAX_BATCH_SIZE",
    "classify_expo_error",
]
