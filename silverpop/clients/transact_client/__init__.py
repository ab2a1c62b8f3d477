from .client import TransactClient
from .decoder import TransactMessageResponseDecoder
from .encoder import TransactMessageEncoder
from .exceptions import (
    TransactClientError,
    TransactConfigurationError,
    TransactDecodeError,
    TransactError,
    TransactStatusNotFoundError,
    TransactValidationError,
)
from .models import (
    BodyType,
    TransactMessage,
    TransactMessageResponse,
    TransactMessageResponseError,
    TransactMessageResponseStatus,
    TransactRecipient,
    TransactRecipientDetail,
)


__all__ = [
    "BodyType",
    "TransactClient",
    "TransactClientError",
    "TransactConfigurationError",
    "TransactDecodeError",
    "TransactError",
    "TransactMessage",
    "TransactMessageEncoder",
    "TransactMessageResponse",
    "TransactMessageResponseDecoder",
    "TransactMessageResponseError",
    "TransactMessageResponseStatus",
    "TransactRecipient",
    "TransactRecipientDetail",
    "TransactStatusNotFoundError",
    "TransactValidationError",
]
