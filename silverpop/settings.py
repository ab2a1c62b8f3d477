from functools import lru_cache
from typing import Self, final

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@final
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SILVERPOP_", env_file=".env", extra="ignore")

    debug: bool = False
    log_level: str = "INFO"
    pod_number: int | None = None
    transact_https_url: str = ""
    transact_sftp_url: str = ""
    oauth_url: str = ""
    username: str = ""
    password: str = ""
    oauth_client_id: str = ""
    oauth_client_secret: str = ""
    oauth_refresh_token: str = ""
    timeout: int = 30

    @model_validator(mode="after")
    def fill_pod_urls(self) -> Self:
        if self.pod_number is None:
            return self
        if not self.transact_https_url.strip():
            self.transact_https_url = f"https://transact{self.pod_number}.silverpop.com/XTMail"
        if not self.transact_sftp_url.strip():
            self.transact_sftp_url = f"transfer{self.pod_number}.silverpop.com"
        if not self.oauth_url.strip():
            self.oauth_url = f"https://api{self.pod_number}.silverpop.com/oauth/token"
        return self

    @property
    def has_oauth_credentials(self) -> bool:
        return all([self.oauth_client_id, self.oauth_client_secret, self.oauth_refresh_token])


@lru_cache  # get it from memory
def get_settings() -> Settings:
    return Settings()
