from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, Self


if TYPE_CHECKING:
    from types import TracebackType


class ISilverpopCommunicationsClient(Protocol):
    """A transport session, opened once per TransactClient call."""

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    def http_upload(self, payload: str) -> str: ...

    def sftp_upload(self, payload: str, remote_path: str) -> None: ...

    def sftp_move(self, from_path: str, to_path: str) -> None: ...

    def sftp_download(self, remote_path: str) -> bytes | None: ...

    async def ahttp_upload(self, payload: str) -> str: ...

    async def asftp_upload(self, payload: str, remote_path: str) -> None: ...

    async def asftp_move(self, from_path: str, to_path: str) -> None: ...

    async def asftp_download(self, remote_path: str) -> bytes | None: ...
