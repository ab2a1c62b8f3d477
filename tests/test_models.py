import pytest
from pydantic import ValidationError

from silverpop.clients.transact_client import BodyType, TransactMessage, TransactRecipient
from tests.fakes import make_message


class TestTransactRecipient:
    def test_defaults(self):
        recipient = TransactRecipient(email="someone@example.com")
        assert recipient.body_type == BodyType.HTML
        assert recipient.personalization_tags == {}

    def test_rejects_invalid_email(self):
        with pytest.raises(ValidationError):
            TransactRecipient(email="not-an-email")


class TestTransactMessage:
    def test_requires_campaign_id(self):
        with pytest.raises(ValidationError):
            TransactMessage(campaign_id="")

    def test_is_immutable(self):
        message = make_message(1)
        with pytest.raises(ValidationError):
            message.campaign_id = "other"

    def test_for_recipient(self):
        recipient = TransactRecipient(email="solo@example.com")
        message = TransactMessage.for_recipient("123", recipient, transaction_id="tx")
        assert message.recipients == [recipient]
        assert message.transaction_id == "tx"


class TestRecipientBatchedMessages:
    def test_partitions_in_order(self):
        message = make_message(12001)

        batches = list(message.get_recipient_batched_messages(5000))

        assert [len(batch.recipients) for batch in batches] == [5000, 5000, 2001]
        flattened = [recipient for batch in batches for recipient in batch.recipients]
        assert flattened == message.recipients

    def test_exact_multiple_has_no_empty_tail(self):
        batches = list(make_message(10).get_recipient_batched_messages(5))
        assert [len(batch.recipients) for batch in batches] == [5, 5]

    def test_no_recipients_yields_nothing(self):
        assert list(make_message(0).get_recipient_batched_messages(5000)) == []

    def test_keeps_message_fields(self):
        message = make_message(
            3,
            transaction_id="tx-9",
            send_as_batch=True,
            no_retry_on_failure=True,
            show_all_send_detail=False,
            save_columns=["FirstName"],
        )

        for batch in message.get_recipient_batched_messages(2):
            assert batch.campaign_id == message.campaign_id
            assert batch.transaction_id == "tx-9"
            assert batch.send_as_batch is True
            assert batch.no_retry_on_failure is True
            assert batch.show_all_send_detail is False
            assert batch.save_columns == ["FirstName"]

    def test_is_lazy(self):
        batches = make_message(3).get_recipient_batched_messages(1)
        first = next(batches)
        assert [str(r.email) for r in first.recipients] == ["user0@example.com"]

    def test_original_message_untouched(self):
        message = make_message(7)
        list(message.get_recipient_batched_messages(3))
        assert len(message.recipients) == 7

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, size):
        with pytest.raises(ValueError, match="positive"):
            list(make_message(1).get_recipient_batched_messages(size))


class TestXmlTextValidation:
    @pytest.mark.parametrize(
        "tags",
        [
            {"Note": "a\x01b"},
            {"Bad\x1fTag": "value"},
            {"Note": "form\x0cfeed"},
        ],
    )
    def test_recipient_rejects_control_characters(self, tags):
        with pytest.raises(ValidationError, match="not allowed in XML"):
            TransactRecipient(email="someone@example.com", personalization_tags=tags)

    @pytest.mark.parametrize(
        "fields",
        [
            {"campaign_id": "12\x0034"},
            {"campaign_id": "1", "transaction_id": "tx\x1b"},
            {"campaign_id": "1", "save_columns": ["First\x08Name"]},
        ],
    )
    def test_message_rejects_control_characters(self, fields):
        with pytest.raises(ValidationError, match="not allowed in XML"):
            TransactMessage(**fields)

    def test_allows_whitespace_and_unicode(self):
        recipient = TransactRecipient(
            email="someone@example.com",
            personalization_tags={"Address": "Line 1\r\nLine 2\tend", "Name": "Zoë 😀"},
        )

        assert recipient.personalization_tags["Name"] == "Zoë 😀"
