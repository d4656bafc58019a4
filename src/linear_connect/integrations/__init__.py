"""Integration clients for external APIs."""

from linear_connect.integrations._base import BaseAPIClient, IntegrationError
from linear_connect.integrations.intercom import IntercomClient
from linear_connect.integrations.linear import GraphQLError, LinearClient

__all__ = [
    "BaseAPIClient",
    "GraphQLError",
    "IntegrationError",
    "IntercomClient",
    "LinearClient",
]
