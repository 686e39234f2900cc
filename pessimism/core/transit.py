"""Data exchanged between ETL components and the risk engine."""

from __future__ import annotations

import abc
import json
import queue
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from Crypto.Hash import keccak

from pessimism.core.ids import PUUID
from pessimism.core.types import Network, RegisterType

ADDRESS_KEY = "address"
NESTED_ARGS = "args"

L1_PORTAL = "l1_portal_address"
L2_TO_L1_MESSAGE_PASSER = "l2_to_l1_address"
L2_OUTPUT_ORACLE = "l2_output_address"

_ADDRESS_LENGTH = 20


@dataclass(frozen=True)
class Address:
    """A 20-byte account address."""

    raw: bytes = bytes(_ADDRESS_LENGTH)

    def __post_init__(self) -> None:
        if len(self.raw) != _ADDRESS_LENGTH:
            raise ValueError(
                f"address requires {_ADDRESS_LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, value: str) -> Address:
        """Parse a hex string; longer input keeps its last 20 bytes, shorter is left padded."""
        text = value[2:] if value[:2] in ("0x", "0X") else value
        if len(text) % 2:
            text = "0" + text
        data = bytes.fromhex(text)[-_ADDRESS_LENGTH:]
        return cls(data.rjust(_ADDRESS_LENGTH, b"\x00"))

    def is_zero(self) -> bool:
        """Whether every byte of the address is zero."""
        return not any(self.raw)

    def __str__(self) -> str:
        plain = self.raw.hex()
        digest = keccak.new(digest_bits=256, data=plain.encode("ascii")).hexdigest()
        checksummed = "".join(
            char.upper() if char.isalpha() and int(nibble, 16) >= 8 else char
            for char, nibble in zip(plain, digest)
        )
        return "0x" + checksummed


ZERO_ADDRESS = Address()


@dataclass
class TransitData:
    """Standard representation of data flowing through the ETL and engine."""

    register_type: RegisterType
    value: Any = None
    timestamp: datetime = field(default_factory=datetime.now)
    origin_ts: datetime | None = None
    network: Network = Network.UNKNOWN
    address: Address = ZERO_ADDRESS

    def addressed(self) -> bool:
        """Whether the data is associated with an address."""
        return not self.address.is_zero()


def new_transit_data(
    register_type: RegisterType,
    value: Any,
    address: Address | None = None,
    origin_ts: datetime | None = None,
) -> TransitData:
    """Create transit data stamped with the current time."""
    return TransitData(
        register_type=register_type,
        value=value,
        address=ZERO_ADDRESS if address is None else address,
        origin_ts=origin_ts,
    )


@dataclass
class HeuristicInput:
    """Transit data tagged with the pipeline that produced it."""

    puuid: PUUID
    input: TransitData


class EngineInputRelay:
    """Binds the final output of an ETL pipeline to the risk engine's input."""

    def __init__(self, puuid: PUUID, out: queue.Queue) -> None:
        self.puuid = puuid
        self.out = out

    def relay_transit_data(self, td: TransitData) -> None:
        """Wrap transit data as heuristic input and send it to the engine."""
        self.out.put(HeuristicInput(puuid=self.puuid, input=td))


class SessionParams:
    """Parameters used to initialise a heuristic session."""

    def __init__(self) -> None:
        self._params: dict[str, Any] = {NESTED_ARGS: []}

    def to_bytes(self) -> bytes:
        """Compact JSON encoding of the parameters with sorted keys."""
        return json.dumps(
            self._params, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")

    def value(self, key: str) -> Any:
        """Return the value stored under ``key``."""
        try:
            return self._params[key]
        except KeyError:
            raise KeyError(f"key {key} not found") from None

    def address(self) -> Address:
        """The address parameter, or the zero address if absent or not a string."""
        raw = self._params.get(ADDRESS_KEY)
        if not isinstance(raw, str):
            return ZERO_ADDRESS
        return Address.from_hex(raw)

    def set_value(self, key: str, value: Any) -> None:
        """Store a value under ``key``."""
        self._params[key] = value

    def set_nested_arg(self, arg: Any) -> None:
        """Append an argument to the nested argument list."""
        self._params[NESTED_ARGS] = [*self.nested_args(), arg]

    def nested_args(self) -> list[Any]:
        """The nested arguments, or an empty list if none are set."""
        args = self._params.get(NESTED_ARGS)
        return list(args) if isinstance(args, list) else []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionParams):
            return NotImplemented
        return self._params == other._params

    def __repr__(self) -> str:
        return f"SessionParams({self._params!r})"


@dataclass
class Activation:
    """A heuristic activation event."""

    timestamp: datetime
    message: str


class Subsystem(abc.ABC):
    """A long running part of the application."""

    @abc.abstractmethod
    def event_loop(self) -> None:
        """Run until shut down."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Stop the event loop."""