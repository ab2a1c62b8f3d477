from silverpop.interfaces.communications import ISilverpopCommunicationsClient


__all__ = [
    "ISilverpopCommunicationsClient",
]
