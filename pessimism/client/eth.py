"""Ethereum JSON-RPC clients and lookup of the clients an application uses."""

from __future__ import annotations

import abc
import itertools
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import requests

from pessimism.core.transit import Address
from pessimism.core.types import ETH_CLIENT_TIMEOUT, Network

_NAMED_BLOCKS = {-1: "pending", -2: "latest", -3: "finalized", -4: "safe"}


class ClientError(Exception):
    """Raised when a chain client cannot be found or a call fails."""


class EthClient(abc.ABC):
    """Operations the service needs from an Ethereum node."""

    @abc.abstractmethod
    def call_contract(self, msg: Mapping[str, Any], number: int | None) -> bytes:
        """Execute a message call without creating a transaction."""

    @abc.abstractmethod
    def code_at(self, account: Address | str, number: int | None) -> bytes:
        """Contract code of an account."""

    @abc.abstractmethod
    def header_by_number(self, number: int | None) -> dict[str, Any]:
        """Block header at a height, or the latest one."""

    @abc.abstractmethod
    def block_by_number(self, number: int | None) -> dict[str, Any]:
        """Full block at a height, or the latest one."""

    @abc.abstractmethod
    def balance_at(self, account: Address | str, number: int | None) -> int:
        """Balance of an account in wei."""

    @abc.abstractmethod
    def filter_logs(self, query: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Logs matching a filter query."""


class GethClient(abc.ABC):
    """Geth specific node operations."""

    @abc.abstractmethod
    def get_proof(
        self, account: Address | str, keys: Sequence[str], number: int | None
    ) -> dict[str, Any]:
        """Merkle proof of an account and some of its storage slots."""


@dataclass
class Dependencies:
    """Shared objects the application's parts look up at run time."""

    state: Any = None
    l1_client: EthClient | None = None
    l2_client: EthClient | None = None
    l2_geth: GethClient | None = None


def eth_client_from(deps: Dependencies, network: Network) -> EthClient:
    """The client for a network; anything but layer 2 uses the layer 1 client."""
    client = deps.l2_client if network == Network.LAYER2 else deps.l1_client
    if client is None:
        raise ClientError("could not load eth client object from context")
    return client


def l2_geth_from(deps: Dependencies) -> GethClient:
    """The layer 2 geth client."""
    if deps.l2_geth is None:
        raise ClientError("could not load eth client object from context")
    return deps.l2_geth


def _block_arg(number: int | None) -> str:
    if number is None:
        return "latest"
    if number >= 0:
        return hex(number)
    try:
        return _NAMED_BLOCKS[number]
    except KeyError:
        raise ValueError(f"invalid block number {number}") from None


def _to_rpc(value: Any) -> Any:
    if isinstance(value, Address):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, int):
        return hex(value)
    if isinstance(value, Mapping):
        return {key: _to_rpc(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_rpc(item) for item in value]
    return value


def _hex_bytes(value: str) -> bytes:
    text = value[2:] if value[:2] in ("0x", "0X") else value
    return bytes.fromhex(text)


class JsonRpcEthClient(EthClient, GethClient):
    """Talks to a node over HTTP JSON-RPC."""

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float = ETH_CLIENT_TIMEOUT,
    ) -> None:
        self.url = url
        self._session = session or requests.Session()
        self._timeout = timeout
        self._ids = itertools.count(1)

    def _call(self, method: str, params: list[Any]) -> Any:
        request = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = self._session.post(self.url, json=request, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ClientError(f"{method} failed: {exc}") from exc
        with response:
            if response.status_code >= 300:
                raise ClientError(f"{method} failed with HTTP status {response.status_code}")
            try:
                body = response.json()
            except ValueError as exc:
                raise ClientError(f"{method} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise ClientError(f"{method} returned a malformed response")
        error = body.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ClientError(f"{method} failed: {message}")
        return body.get("result")

    def _block(self, number: int | None, full: bool) -> dict[str, Any]:
        result = self._call("eth_getBlockByNumber", [_block_arg(number), full])
        if result is None:
            raise ClientError("not found")
        return result

    def header_by_number(self, number: int | None) -> dict[str, Any]:
        return self._block(number, False)

    def block_by_number(self, number: int | None) -> dict[str, Any]:
        return self._block(number, True)

    def balance_at(self, account: Address | str, number: int | None) -> int:
        result = self._call("eth_getBalance", [_to_rpc(account), _block_arg(number)])
        return int(result, 16)

    def code_at(self, account: Address | str, number: int | None) -> bytes:
        result = self._call("eth_getCode", [_to_rpc(account), _block_arg(number)])
        return _hex_bytes(result)

    def call_contract(self, msg: Mapping[str, Any], number: int | None) -> bytes:
        result = self._call("eth_call", [_to_rpc(msg), _block_arg(number)])
        return _hex_bytes(result)

    def filter_logs(self, query: Mapping[str, Any]) -> list[dict[str, Any]]:
        result = self._call("eth_getLogs", [_to_rpc(query)])
        return list(result or [])

    def get_proof(
        self, account: Address | str, keys: Sequence[str], number: int | None
    ) -> dict[str, Any]:
        result = self._call(
            "eth_getProof", [_to_rpc(account), list(keys), _block_arg(number)]
        )
        if result is None:
            raise ClientError("not found")
        return result