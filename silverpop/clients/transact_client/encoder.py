import xml.etree.ElementTree as ET

import structlog

from .models import TransactMessage, TransactRecipient


logger = structlog.get_logger(__name__)


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


class TransactMessageEncoder:
    """Serializes a TransactMessage into an XTMAILING request document."""

    def encode(self, message: TransactMessage) -> str:
        root = ET.Element("XTMAILING")

        ET.SubElement(root, "CAMPAIGN_ID").text = message.campaign_id
        if message.transaction_id:
            ET.SubElement(root, "TRANSACTION_ID").text = message.transaction_id

        ET.SubElement(root, "SHOW_ALL_SEND_DETAIL").text = _bool_text(message.show_all_send_detail)
        ET.SubElement(root, "SEND_AS_BATCH").text = _bool_text(message.send_as_batch)
        ET.SubElement(root, "NO_RETRY_ON_FAILURE").text = _bool_text(message.no_retry_on_failure)

        if message.save_columns:
            save_columns = ET.SubElement(root, "SAVE_COLUMNS")
            for column_name in message.save_columns:
                ET.SubElement(save_columns, "COLUMN_NAME").text = column_name

        for recipient in message.recipients:
            self._encode_recipient(root, recipient)

        logger.debug(
            "message_encoded",
            campaign_id=message.campaign_id,
            recipients=len(message.recipients),
        )

        return ET.tostring(root, encoding="unicode")

    @staticmethod
    def _encode_recipient(root: ET.Element, recipient: TransactRecipient) -> None:
        node = ET.SubElement(root, "RECIPIENT")
        ET.SubElement(node, "EMAIL").text = str(recipient.email)
        ET.SubElement(node, "BODY_TYPE").text = recipient.body_type.value

        for tag_name, value in recipient.personalization_tags.items():
            personalization = ET.SubElement(node, "PERSONALIZATION")
            ET.SubElement(personalization, "TAG_NAME").text = tag_name
            ET.SubElement(personalization, "VALUE").text = value
