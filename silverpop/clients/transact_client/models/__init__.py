from .requests import BodyType, TransactMessage, TransactRecipient
from .responses import (
    TransactMessageResponse,
    TransactMessageResponseError,
    TransactMessageResponseStatus,
    TransactRecipientDetail,
)


__all__ = [
    "BodyType",
    "TransactMessage",
    "TransactMessageResponse",
    "TransactMessageResponseError",
    "TransactMessageResponseStatus",
    "TransactRecipient",
    "TransactRecipientDetail",
]
