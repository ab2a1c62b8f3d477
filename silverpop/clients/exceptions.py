class BaseClientError(Exception):
    pass


class BaseAuthenticationError(BaseClientError):
    pass


class BaseValidationError(BaseClientError):
    pass


class BaseConfigurationError(BaseClientError):
    pass


class SilverpopCommunicationsError(BaseClientError):
    pass


class SilverpopAuthenticationError(SilverpopCommunicationsError, BaseAuthenticationError):
    pass
