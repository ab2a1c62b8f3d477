from dishka import make_container

from silverpop.adapters.communications import SilverpopCommunicationsClient
from silverpop.clients.transact_client import TransactClient
from silverpop.ioc import TransactProvider
from silverpop.settings import Settings


def test_provides_transact_client(monkeypatch):
    monkeypatch.setenv("SILVERPOP_POD_NUMBER", "3")
    container = make_container(TransactProvider())
    try:
        client = container.get(TransactClient)

        assert client is container.get(TransactClient)
        assert client.settings is container.get(Settings)
        assert client.settings.transact_https_url == "https://transact3.silverpop.com/XTMail"
        assert isinstance(client.communications_factory(), SilverpopCommunicationsClient)
    finally:
        container.close()
