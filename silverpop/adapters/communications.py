import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from http import HTTPStatus
import io
from types import TracebackType
from typing import Any, Self
from urllib.parse import urlsplit

import niquests
import paramiko
import structlog
from niquests import AsyncSession, Session

from silverpop.clients.exceptions import SilverpopAuthenticationError, SilverpopCommunicationsError
from silverpop.settings import Settings


logger = structlog.get_logger(__name__)

DEFAULT_SFTP_PORT = 22


class SilverpopCommunicationsClient:
    """Transport session for the Transact endpoints.

    HTTP goes through niquests, the drop-box through paramiko SFTP. Both
    connections are opened on first use and closed when the context exits, so a
    session that only uploads over HTTP never dials the SFTP host.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.timeout = settings.timeout
        self._session: Session | None = None
        self._async_session: AsyncSession | None = None
        self._access_token: str | None = None
        self._transport: paramiko.Transport | None = None
        self._sftp: paramiko.SFTPClient | None = None

        self.logger = logger.bind(
            service="silverpop_communications",
            https_url=settings.transact_https_url,
            sftp_url=settings.transact_sftp_url,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if self._async_session is not None:
                await self._async_session.close()
        finally:
            self._async_session = None
            await asyncio.to_thread(self.close)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            self.logger.debug("sftp_connection_closed")

    # HTTP

    def http_upload(self, payload: str) -> str:
        if self._session is None:
            self._session = Session()

        if self.settings.has_oauth_credentials and self._access_token is None:
            response = self._post(self._session, self.settings.oauth_url, data=self._oauth_form())
            self._access_token = self._read_access_token(response)

        response = self._post(
            self._session,
            self.settings.transact_https_url,
            data=payload.encode("utf-8"),
            headers=self._get_headers(),
        )
        return response.text

    async def ahttp_upload(self, payload: str) -> str:
        if self._async_session is None:
            self._async_session = AsyncSession()

        if self.settings.has_oauth_credentials and self._access_token is None:
            response = await self._apost(self._async_session, self.settings.oauth_url, data=self._oauth_form())
            self._access_token = self._read_access_token(response)

        response = await self._apost(
            self._async_session,
            self.settings.transact_https_url,
            data=payload.encode("utf-8"),
            headers=self._get_headers(),
        )
        return response.text

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "text/xml;charset=UTF-8"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    def _oauth_form(self) -> dict[str, str]:
        return {
            "grant_type": "refresh_token",
            "client_id": self.settings.oauth_client_id,
            "client_secret": self.settings.oauth_client_secret,
            "refresh_token": self.settings.oauth_refresh_token,
        }

    def _read_access_token(self, response: niquests.Response) -> str:
        token = (response.json() or {}).get("access_token")
        if not token:
            self.logger.error("access_token_missing", response=response.text)
            raise SilverpopAuthenticationError("OAuth response does not contain an access_token")
        self.logger.debug("access_token_received")
        return token

    def _post(self, session: Session, url: str, **kwargs: Any) -> niquests.Response:
        self.logger.debug("making_request", method="POST", url=url)
        try:
            response = session.post(url, timeout=self.timeout, **kwargs)
        except niquests.exceptions.Timeout as e:
            self.logger.exception("request_timeout", method="POST", url=url, error=str(e))
            raise SilverpopCommunicationsError(f"Request timeout: {e}") from e
        except niquests.exceptions.RequestException as e:
            self.logger.exception("request_exception", method="POST", url=url, error=str(e))
            raise SilverpopCommunicationsError(f"Request failed: {e}") from e

        self._handle_response_errors(response)
        self.logger.debug("request_successful", method="POST", url=url, status_code=response.status_code)
        return response

    async def _apost(self, session: AsyncSession, url: str, **kwargs: Any) -> niquests.Response:
        self.logger.debug("making_request", method="POST", url=url)
        try:
            response = await session.post(url, timeout=self.timeout, **kwargs)
        except niquests.exceptions.Timeout as e:
            self.logger.exception("request_timeout", method="POST", url=url, error=str(e))
            raise SilverpopCommunicationsError(f"Request timeout: {e}") from e
        except niquests.exceptions.RequestException as e:
            self.logger.exception("request_exception", method="POST", url=url, error=str(e))
            raise SilverpopCommunicationsError(f"Request failed: {e}") from e

        self._handle_response_errors(response)
        self.logger.debug("request_successful", method="POST", url=url, status_code=response.status_code)
        return response

    def _handle_response_errors(self, response: niquests.Response) -> None:
        if response.status_code == HTTPStatus.UNAUTHORIZED:
            self.logger.error("authentication_failed", status_code=HTTPStatus.UNAUTHORIZED)
            raise SilverpopAuthenticationError("Silverpop rejected the credentials")

        if not response.ok:
            self.logger.error(
                "request_failed",
                status_code=response.status_code,
                response=response.text,
            )
            raise SilverpopCommunicationsError(
                f"Request failed with status {response.status_code}: {response.text}",
            )

    # SFTP

    def sftp_upload(self, payload: str, remote_path: str) -> None:
        self.logger.debug("sftp_upload", remote_path=remote_path, size=len(payload))
        with self._sftp_errors("sftp_upload", remote_path):
            self._get_sftp().putfo(io.BytesIO(payload.encode("utf-8")), remote_path)

    def sftp_move(self, from_path: str, to_path: str) -> None:
        self.logger.debug("sftp_move", from_path=from_path, to_path=to_path)
        with self._sftp_errors("sftp_move", from_path):
            self._get_sftp().rename(from_path, to_path)

    def sftp_download(self, remote_path: str) -> bytes | None:
        self.logger.debug("sftp_download", remote_path=remote_path)
        buffer = io.BytesIO()
        try:
            with self._sftp_errors("sftp_download", remote_path):
                self._get_sftp().getfo(remote_path, buffer)
        except FileNotFoundError:
            self.logger.info("sftp_file_not_found", remote_path=remote_path)
            return None
        return buffer.getvalue()

    async def asftp_upload(self, payload: str, remote_path: str) -> None:
        await asyncio.to_thread(self.sftp_upload, payload, remote_path)

    async def asftp_move(self, from_path: str, to_path: str) -> None:
        await asyncio.to_thread(self.sftp_move, from_path, to_path)

    async def asftp_download(self, remote_path: str) -> bytes | None:
        return await asyncio.to_thread(self.sftp_download, remote_path)

    def _get_sftp(self) -> paramiko.SFTPClient:
        if self._sftp is not None:
            return self._sftp

        host, port = self._sftp_address()
        self.logger.debug("sftp_connecting", host=host, port=port)
        try:
            self._transport = paramiko.Transport((host, port))
            self._transport.connect(username=self.settings.username, password=self.settings.password)
            self._sftp = paramiko.SFTPClient.from_transport(self._transport)
        except paramiko.AuthenticationException as e:
            self.logger.exception("sftp_authentication_failed", host=host)
            self.close()
            raise SilverpopAuthenticationError(f"SFTP authentication failed for {host}") from e
        except (paramiko.SSHException, OSError) as e:
            self.logger.exception("sftp_connection_failed", host=host, error=str(e))
            self.close()
            raise SilverpopCommunicationsError(f"SFTP connection to {host} failed: {e}") from e

        if self._sftp is None:
            self.close()
            raise SilverpopCommunicationsError(f"SFTP channel to {host} could not be opened")
        return self._sftp

    def _sftp_address(self) -> tuple[str, int]:
        url = self.settings.transact_sftp_url.strip()
        if "://" not in url:
            url = f"sftp://{url}"
        parts = urlsplit(url)
        return parts.hostname or "", parts.port or DEFAULT_SFTP_PORT

    @contextmanager
    def _sftp_errors(self, operation: str, remote_path: str) -> Iterator[None]:
        try:
            yield
        except FileNotFoundError:
            raise
        except (paramiko.SSHException, OSError) as e:
            self.logger.exception(f"{operation}_failed", remote_path=remote_path, error=str(e))
            raise SilverpopCommunicationsError(f"{operation} failed for {remote_path}: {e}") from e
