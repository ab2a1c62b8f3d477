from collections.abc import Callable
from datetime import datetime

import pytz
import structlog

from silverpop.adapters.communications import SilverpopCommunicationsClient
from silverpop.interfaces.communications import ISilverpopCommunicationsClient
from silverpop.settings import Settings
from .decoder import TransactMessageResponseDecoder
from .encoder import TransactMessageEncoder
from .exceptions import (
    TransactClientError,
    TransactConfigurationError,
    TransactDecodeError,
    TransactStatusNotFoundError,
    TransactValidationError,
)
from .models import (
    TransactMessage,
    TransactMessageResponse,
    TransactMessageResponseError,
    TransactMessageResponseStatus,
)


logger = structlog.get_logger(__name__)

TEMP_FOLDER = "transact/temp/"
INBOUND_FOLDER = "transact/inbound/"
STATUS_FOLDER = "transact/status/"


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class TransactClient:
    MAX_RECIPIENTS_PER_BATCH_REQUEST = 5000
    MAX_RECIPIENTS_PER_NON_BATCH_REQUEST = 10

    ERROR_MISSING_HTTPS_URL = "A valid transact_https_url must be provided."
    ERROR_MISSING_SFTP_URL = "A valid transact_sftp_url must be provided."
    ERROR_EXCEEDED_NON_BATCH_RECIPIENTS = (
        f"Number of recipients exceeds the max of {MAX_RECIPIENTS_PER_NON_BATCH_REQUEST} recipients permitted. "
        "Use send_message_batch or asend_message_batch instead."
    )

    def __init__(
        self,
        settings: Settings,
        encoder: TransactMessageEncoder | None = None,
        decoder: TransactMessageResponseDecoder | None = None,
        communications_factory: Callable[[], ISilverpopCommunicationsClient] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings
        self.encoder = encoder or TransactMessageEncoder()
        self.decoder = decoder or TransactMessageResponseDecoder()
        self.communications_factory = communications_factory or (lambda: SilverpopCommunicationsClient(settings))
        self.clock = clock

        self.logger = logger.bind(service="transact_client")

    def send_message(self, message: TransactMessage) -> TransactMessageResponse:
        self._verify_send_message(message)

        encoded_message = self.encoder.encode(message)
        self.logger.debug("sending_message", campaign_id=message.campaign_id, recipients=len(message.recipients))

        with self.communications_factory() as silverpop:
            response = silverpop.http_upload(encoded_message)

        return self._decode_send_message_response(response)

    async def asend_message(self, message: TransactMessage) -> TransactMessageResponse:
        self._verify_send_message(message)

        encoded_message = self.encoder.encode(message)
        self.logger.debug("sending_message", campaign_id=message.campaign_id, recipients=len(message.recipients))

        async with self.communications_factory() as silverpop:
            response = await silverpop.ahttp_upload(encoded_message)

        return self._decode_send_message_response(response)

    def send_message_batch(self, message: TransactMessage) -> list[str]:
        """Drop the message into the SFTP inbound folder, one file per batch of recipients.

        Returns the generated filenames, usable with get_status_of_message_batch.
        """
        if message is None:
            raise TransactValidationError("message must not be None")
        self._verify_sftp_configuration()

        filenames: list[str] = []

        with self.communications_factory() as silverpop:
            for batch_message in message.get_recipient_batched_messages(self.MAX_RECIPIENTS_PER_BATCH_REQUEST):
                encoded_message = self.encoder.encode(batch_message)
                filename = self._batch_filename(len(filenames) + 1)

                silverpop.sftp_upload(encoded_message, TEMP_FOLDER + filename)
                silverpop.sftp_move(TEMP_FOLDER + filename, INBOUND_FOLDER + filename)

                filenames.append(filename)
                self._log_partition(batch_message, filename)

        return filenames

    async def asend_message_batch(self, message: TransactMessage) -> list[str]:
        """Async counterpart of send_message_batch; partitions are still sent one after another."""
        if message is None:
            raise TransactValidationError("message must not be None")
        self._verify_sftp_configuration()

        filenames: list[str] = []

        async with self.communications_factory() as silverpop:
            for batch_message in message.get_recipient_batched_messages(self.MAX_RECIPIENTS_PER_BATCH_REQUEST):
                encoded_message = self.encoder.encode(batch_message)
                filename = self._batch_filename(len(filenames) + 1)

                await silverpop.asftp_upload(encoded_message, TEMP_FOLDER + filename)
                await silverpop.asftp_move(TEMP_FOLDER + filename, INBOUND_FOLDER + filename)

                filenames.append(filename)
                self._log_partition(batch_message, filename)

        return filenames

    def get_status_of_message_batch(self, filename: str) -> TransactMessageResponse:
        self._verify_status_request(filename)

        with self.communications_factory() as silverpop:
            content = silverpop.sftp_download(STATUS_FOLDER + filename)

        return self._decode_status(filename, content)

    async def aget_status_of_message_batch(self, filename: str) -> TransactMessageResponse:
        self._verify_status_request(filename)

        async with self.communications_factory() as silverpop:
            content = await silverpop.asftp_download(STATUS_FOLDER + filename)

        return self._decode_status(filename, content)

    def _batch_filename(self, sequence: int) -> str:
        timestamp = self.clock().strftime("%Y-%m-%dT%H:%M:%S").replace(":", "_")
        return f"{timestamp}_UTC.{sequence}.xml"

    def _log_partition(self, batch_message: TransactMessage, filename: str) -> None:
        self.logger.info(
            "batch_partition_uploaded",
            campaign_id=batch_message.campaign_id,
            recipients=len(batch_message.recipients),
            filename=filename,
        )

    def _decode_send_message_response(self, response: str) -> TransactMessageResponse:
        decoded_response = self.decoder.decode(response)

        if decoded_response.status == TransactMessageResponseStatus.ENCOUNTERED_ERRORS_NO_MESSAGES_SENT:
            error = decoded_response.error or TransactMessageResponseError(code=0, message="No messages were sent")
            self.logger.error("message_not_sent", error_code=error.code, error_message=error.message)
            raise TransactClientError.from_error(error)

        self.logger.debug(
            "message_sent",
            status=decoded_response.status.name,
            transaction_id=decoded_response.transaction_id,
        )
        return decoded_response

    def _decode_status(self, filename: str, content: bytes | None) -> TransactMessageResponse:
        if not content:
            self.logger.warning("batch_status_not_found", filename=filename)
            raise TransactStatusNotFoundError(f"{filename} does not exist in the {STATUS_FOLDER.rstrip('/')} folder")

        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            self.logger.exception("batch_status_undecodable", filename=filename)
            raise TransactDecodeError(f"{filename} is not valid UTF-8: {e}") from e

        return self.decoder.decode(text)

    def _verify_send_message(self, message: TransactMessage) -> None:
        if message is None:
            raise TransactValidationError("message must not be None")

        if len(message.recipients) > self.MAX_RECIPIENTS_PER_NON_BATCH_REQUEST:
            raise TransactValidationError(self.ERROR_EXCEEDED_NON_BATCH_RECIPIENTS)

        if not self.settings.transact_https_url.strip():
            raise TransactConfigurationError(self.ERROR_MISSING_HTTPS_URL)

    def _verify_sftp_configuration(self) -> None:
        if not self.settings.transact_sftp_url.strip():
            raise TransactConfigurationError(self.ERROR_MISSING_SFTP_URL)

    def _verify_status_request(self, filename: str) -> None:
        if filename is None:
            raise TransactValidationError("filename must not be None")
        self._verify_sftp_configuration()
