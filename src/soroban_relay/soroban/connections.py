"""Connection helpers for Soroban RPC and Horizon."""

from __future__ import annotations

import logging

import requests
from stellar_sdk import SorobanServer
from stellar_sdk.client.requests_client import RequestsClient

from ..constants import DEFAULT_REQUEST_TIMEOUT
from ..networks import NetworkProfile
from .reconciler import HorizonQuery

logger = logging.getLogger(__name__)


class SorobanConnections:
    """Build per-network RPC servers and Horizon query clients.

    RPC servers are created per call so no state is carried between relay
    requests; the Horizon session only pools HTTP connections.
    """

    def __init__(
        self,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._request_timeout = request_timeout
        self._session = session or requests.Session()

    @property
    def request_timeout(self) -> float:
        return self._request_timeout

    def rpc_server(self, network: NetworkProfile) -> SorobanServer:
        logger.debug("Opening Soroban RPC client for %s at %s", network.name, network.rpc_url)
        client = RequestsClient(request_timeout=self._request_timeout)
        return SorobanServer(network.rpc_url, client=client)

    def horizon_query(self, network: NetworkProfile) -> HorizonQuery:
        return HorizonQuery(
            network.horizon_url,
            self._session,
            request_timeout=self._request_timeout,
        )

    def close(self) -> None:
        self._session.close()
