import re
from collections.abc import Iterator
from enum import StrEnum
from itertools import batched
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _check_xml_text(value: str) -> str:
    match = _INVALID_XML_CHARS.search(value)
    if match:
        raise ValueError(f"Character {match.group()!r} at position {match.start()} is not allowed in XML")
    return value


class BodyType(StrEnum):
    HTML = "HTML"
    TEXT = "TEXT"


class TransactRecipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    body_type: BodyType = BodyType.HTML
    personalization_tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("personalization_tags")
    @classmethod
    def validate_personalization_tags(cls, tags: dict[str, str]) -> dict[str, str]:
        for tag_name, value in tags.items():
            _check_xml_text(tag_name)
            _check_xml_text(value)
        return tags


class TransactMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    campaign_id: str = Field(..., min_length=1)
    transaction_id: str | None = None
    show_all_send_detail: bool = True
    send_as_batch: bool = False
    no_retry_on_failure: bool = False
    save_columns: list[str] = Field(default_factory=list)
    recipients: list[TransactRecipient] = Field(default_factory=list)

    @field_validator("campaign_id", "transaction_id")
    @classmethod
    def validate_xml_text(cls, value: str | None) -> str | None:
        return value if value is None else _check_xml_text(value)

    @field_validator("save_columns")
    @classmethod
    def validate_save_columns(cls, columns: list[str]) -> list[str]:
        return [_check_xml_text(column) for column in columns]

    @classmethod
    def for_recipient(cls, campaign_id: str, recipient: TransactRecipient, **kwargs: Any) -> Self:
        return cls(campaign_id=campaign_id, recipients=[recipient], **kwargs)

    def get_recipient_batched_messages(self, max_recipients_per_batch: int) -> Iterator[Self]:
        """Yield copies of this message holding consecutive slices of its recipients.

        Every copy keeps the rest of the message untouched. Slices keep the
        original recipient order and only the last one may be shorter than
        ``max_recipients_per_batch``. A message without recipients yields nothing.
        """
        if max_recipients_per_batch < 1:
            raise ValueError("max_recipients_per_batch must be a positive number")

        for chunk in batched(self.recipients, max_recipients_per_batch):
            yield self.model_copy(update={"recipients": list(chunk)})
