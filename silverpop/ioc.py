from dishka import Provider, Scope, provide

from silverpop.clients.transact_client import (
    TransactClient,
    TransactMessageEncoder,
    TransactMessageResponseDecoder,
)
from silverpop.settings import Settings


class TransactProvider(Provider):
    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return Settings()

    @provide(scope=Scope.APP)
    def provide_encoder(self) -> TransactMessageEncoder:
        return TransactMessageEncoder()

    @provide(scope=Scope.APP)
    def provide_decoder(self) -> TransactMessageResponseDecoder:
        return TransactMessageResponseDecoder()

    @provide(scope=Scope.APP)
    def provide_transact_client(
        self,
        settings: Settings,
        encoder: TransactMessageEncoder,
        decoder: TransactMessageResponseDecoder,
    ) -> TransactClient:
        return TransactClient(settings=settings, encoder=encoder, decoder=decoder)
