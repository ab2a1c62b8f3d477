import xml.etree.ElementTree as ET

import structlog

from .exceptions import TransactDecodeError
from .models import (
    TransactMessageResponse,
    TransactMessageResponseError,
    TransactMessageResponseStatus,
    TransactRecipientDetail,
)


logger = structlog.get_logger(__name__)


def _text(node: ET.Element, path: str) -> str | None:
    value = node.findtext(path)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _int(node: ET.Element, path: str) -> int | None:
    value = _text(node, path)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise TransactDecodeError(f"{path} is not a number: {value!r}") from e


def _error(node: ET.Element) -> TransactMessageResponseError | None:
    code = _int(node, "ERROR_CODE")
    message = _text(node, "ERROR_STRING")
    if not code and message is None:
        return None
    return TransactMessageResponseError(code=code or 0, message=message or "")


class TransactMessageResponseDecoder:
    """Parses Transact responses.

    Two documents are understood: the regular ``XTMAILING_RESPONSE`` (global
    status plus per recipient ``RECIPIENT_DETAIL`` entries) and the Engage
    ``Envelope`` fault that the platform answers with when it rejects the
    request as a whole.
    """

    def decode(self, xml_text: str) -> TransactMessageResponse:
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            logger.exception("response_parse_failed", error=str(e))
            raise TransactDecodeError(f"Response is not valid XML: {e}") from e

        if root.tag == "XTMAILING_RESPONSE":
            return self._decode_mailing_response(root, xml_text)
        if root.tag == "Envelope":
            return self._decode_envelope(root, xml_text)

        logger.error("unexpected_response_root", tag=root.tag)
        raise TransactDecodeError(f"Unexpected response root element: {root.tag}")

    def _decode_mailing_response(self, root: ET.Element, raw: str) -> TransactMessageResponse:
        status_code = _int(root, "STATUS")
        if status_code is None:
            raise TransactDecodeError("Response does not contain a STATUS element")
        try:
            status = TransactMessageResponseStatus(status_code)
        except ValueError as e:
            raise TransactDecodeError(f"Unknown response status: {status_code}") from e

        details = [
            TransactRecipientDetail(
                email=_text(node, "EMAIL") or "",
                send_status=_int(node, "SEND_STATUS") or 0,
                error=_error(node),
            )
            for node in root.iterfind("RECIPIENT_DETAIL")
        ]

        error = None
        if status != TransactMessageResponseStatus.SUCCESS:
            error = _error(root) or next(
                (detail.error for detail in details if not detail.is_success and detail.error),
                None,
            )
            if error is None:
                error = TransactMessageResponseError(code=0, message="")

        response = TransactMessageResponse(
            status=status,
            error=error,
            raw_response=raw,
            campaign_id=_text(root, "CAMPAIGN_ID"),
            transaction_id=_text(root, "TRANSACTION_ID"),
            recipients_received=_int(root, "RECIPIENTS_RECEIVED"),
            emails_sent=_int(root, "EMAILS_SENT"),
            number_errors=_int(root, "NUMBER_ERRORS"),
            recipient_details=details,
        )

        logger.debug(
            "response_decoded",
            status=status.name,
            transaction_id=response.transaction_id,
            number_errors=response.number_errors,
        )
        return response

    @staticmethod
    def _decode_envelope(root: ET.Element, raw: str) -> TransactMessageResponse:
        result = root.find("Body/RESULT")
        success = _text(root, "Body/RESULT/SUCCESS")
        if result is None or success is None:
            raise TransactDecodeError("Envelope response does not contain a RESULT/SUCCESS element")

        if success.lower() == "true":
            return TransactMessageResponse(status=TransactMessageResponseStatus.SUCCESS, raw_response=raw)

        fault = root.find("Body/Fault")
        code = 0
        message = ""
        if fault is not None:
            code = _int(fault, "detail/error/errorid") or 0
            message = _text(fault, "FaultString") or ""

        logger.warning("request_fault", error_code=code, error_message=message)
        return TransactMessageResponse(
            status=TransactMessageResponseStatus.ENCOUNTERED_ERRORS_NO_MESSAGES_SENT,
            error=TransactMessageResponseError(code=code, message=message),
            raw_response=raw,
        )
