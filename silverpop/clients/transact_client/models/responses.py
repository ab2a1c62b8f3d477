from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class TransactMessageResponseStatus(IntEnum):
    SUCCESS = 0
    PARTIAL_ERRORS = 1
    ENCOUNTERED_ERRORS_NO_MESSAGES_SENT = 2


class TransactMessageResponseError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    message: str


class TransactRecipientDetail(BaseModel):
    email: str
    send_status: int
    error: TransactMessageResponseError | None = None

    @property
    def is_success(self) -> bool:
        return self.send_status == 0


class TransactMessageResponse(BaseModel):
    status: TransactMessageResponseStatus
    error: TransactMessageResponseError | None = None
    raw_response: str = ""
    campaign_id: str | None = None
    transaction_id: str | None = None
    recipients_received: int | None = None
    emails_sent: int | None = None
    number_errors: int | None = None
    recipient_details: list[TransactRecipientDetail] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == TransactMessageResponseStatus.SUCCESS

    @property
    def failed_recipients(self) -> list[TransactRecipientDetail]:
        return [detail for detail in self.recipient_details if not detail.is_success]
