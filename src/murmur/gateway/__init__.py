"""Completion gateways."""

from .base import CompletionGateway, Failure, FailureKind, GatewayResult, Success
from .canned import CannedCompletionGateway
from .http import HttpCompletionGateway
from .upstream import UpstreamCompletionGateway

__all__ = [
    "CannedCompletionGateway",
    "CompletionGateway",
    "Failure",
    "FailureKind",
    "GatewayResult",
    "HttpCompletionGateway",
    "Success",
    "UpstreamCompletionGateway",
]
