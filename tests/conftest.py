import pytest

from silverpop.clients.transact_client import TransactClient
from silverpop.settings import Settings
from tests.fakes import FIXED_NOW, RecordingCommunicationsClient


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        transact_https_url="https://transact5.silverpop.com/XTMail",
        transact_sftp_url="transfer5.silverpop.com",
        username="user",
        password="secret",
    )


@pytest.fixture
def transport() -> RecordingCommunicationsClient:
    return RecordingCommunicationsClient()


@pytest.fixture
def client(settings: Settings, transport: RecordingCommunicationsClient) -> TransactClient:
    return TransactClient(settings=settings, communications_factory=lambda: transport, clock=lambda: FIXED_NOW)
