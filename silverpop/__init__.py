from silverpop.adapters.communications import SilverpopCommunicationsClient
from silverpop.clients.exceptions import SilverpopAuthenticationError, SilverpopCommunicationsError
from silverpop.clients.transact_client import (
    BodyType,
    TransactClient,
    TransactClientError,
    TransactConfigurationError,
    TransactDecodeError,
    TransactError,
    TransactMessage,
    TransactMessageResponse,
    TransactMessageResponseError,
    TransactMessageResponseStatus,
    TransactRecipient,
    TransactStatusNotFoundError,
    TransactValidationError,
)
from silverpop.settings import Settings, get_settings


__all__ = [
    "BodyType",
    "Settings",
    "SilverpopAuthenticationError",
    "SilverpopCommunicationsClient",
    "SilverpopCommunicationsError",
    "TransactClient",
    "TransactClientError",
    "TransactConfigurationError",
    "TransactDecodeError",
    "TransactError",
    "TransactMessage",
    "TransactMessageResponse",
    "TransactMessageResponseError",
    "TransactMessageResponseStatus",
    "TransactRecipient",
    "TransactStatusNotFoundError",
    "TransactValidationError",
    "get_settings",
]
