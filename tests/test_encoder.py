import xml.etree.ElementTree as ET

from silverpop.clients.transact_client import (
    BodyType,
    TransactMessage,
    TransactMessageEncoder,
    TransactRecipient,
)
from tests.fakes import make_message


def _message() -> TransactMessage:
    return TransactMessage(
        campaign_id="9876",
        transaction_id="order-42",
        save_columns=["FirstName", "OrderId"],
        recipients=[
            TransactRecipient(
                email="first@example.com",
                personalization_tags={"FirstName": "Ann", "OrderId": "42"},
            ),
            TransactRecipient(email="second@example.com", body_type=BodyType.TEXT),
        ],
    )


def test_encodes_message_header():
    root = ET.fromstring(TransactMessageEncoder().encode(_message()))

    assert root.tag == "XTMAILING"
    assert root.findtext("CAMPAIGN_ID") == "9876"
    assert root.findtext("TRANSACTION_ID") == "order-42"
    assert root.findtext("SHOW_ALL_SEND_DETAIL") == "true"
    assert root.findtext("SEND_AS_BATCH") == "false"
    assert root.findtext("NO_RETRY_ON_FAILURE") == "false"
    assert [node.text for node in root.iterfind("SAVE_COLUMNS/COLUMN_NAME")] == ["FirstName", "OrderId"]


def test_encodes_recipients_with_varying_tags():
    root = ET.fromstring(TransactMessageEncoder().encode(_message()))

    first, second = root.findall("RECIPIENT")
    assert first.findtext("EMAIL") == "first@example.com"
    assert first.findtext("BODY_TYPE") == "HTML"
    assert [(p.findtext("TAG_NAME"), p.findtext("VALUE")) for p in first.iterfind("PERSONALIZATION")] == [
        ("FirstName", "Ann"),
        ("OrderId", "42"),
    ]
    assert second.findtext("BODY_TYPE") == "TEXT"
    assert second.findall("PERSONALIZATION") == []


def test_optional_elements_omitted():
    root = ET.fromstring(TransactMessageEncoder().encode(make_message(1)))

    assert root.find("TRANSACTION_ID") is None
    assert root.find("SAVE_COLUMNS") is None


def test_escapes_markup_in_values():
    message = TransactMessage(
        campaign_id="1",
        recipients=[TransactRecipient(email="a@example.com", personalization_tags={"Note": "<b>A & B</b>"})],
    )

    encoded = TransactMessageEncoder().encode(message)

    assert "<b>" not in encoded
    assert ET.fromstring(encoded).findtext("RECIPIENT/PERSONALIZATION/VALUE") == "<b>A & B</b>"


def test_encoding_is_deterministic():
    encoder = TransactMessageEncoder()
    batch = next(_message().get_recipient_batched_messages(5000))

    assert encoder.encode(batch) == encoder.encode(batch)
    assert encoder.encode(batch) == TransactMessageEncoder().encode(batch.model_copy())


def test_output_is_well_formed_for_whitespace_and_unicode():
    message = TransactMessage(
        campaign_id="1",
        recipients=[
            TransactRecipient(
                email="a@example.com",
                personalization_tags={"Address": "Line 1\nLine 2\tend", "Name": "Zoë 😀"},
            ),
        ],
    )

    root = ET.fromstring(TransactMessageEncoder().encode(message))

    values = [node.text for node in root.iterfind("RECIPIENT/PERSONALIZATION/VALUE")]
    assert values == ["Line 1\nLine 2\tend", "Zoë 😀"]
