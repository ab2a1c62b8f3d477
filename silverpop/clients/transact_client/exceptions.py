from __future__ import annotations
from typing import TYPE_CHECKING

from silverpop.clients.exceptions import (
    BaseClientError,
    BaseConfigurationError,
    BaseValidationError,
)


if TYPE_CHECKING:
    from .models import TransactMessageResponseError


class TransactError(BaseClientError):
    pass


class TransactValidationError(TransactError, BaseValidationError):
    pass


class TransactConfigurationError(TransactError, BaseConfigurationError):
    pass


class TransactDecodeError(TransactError):
    pass


class TransactClientError(TransactError):
    def __init__(self, message: str, error: TransactMessageResponseError | None = None) -> None:
        super().__init__(message)
        self.error = error

    @classmethod
    def from_error(cls, error: TransactMessageResponseError) -> TransactClientError:
        return cls(f"Transact request failed: {error.message} (code: {error.code})", error=error)


class TransactStatusNotFoundError(TransactClientError):
    pass
