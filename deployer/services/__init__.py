"""Clients for the external services the deployer talks to."""

from deployer.services.circle import CircleClient, CircleResponse
from deployer.services.credentials import IamKeyClient, ServiceAccountKeyBroker
from deployer.services.google_auth import GoogleIdentity
from deployer.services.pricing import PricePublisher
from deployer.services.storage import ConfigStore

__all__ = [
    "CircleClient",
    "CircleResponse",
    "ConfigStore",
    "GoogleIdentity",
    "IamKeyClient",
    "PricePublisher",
    "ServiceAccountKeyBroker",
]
