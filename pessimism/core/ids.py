"""Identifiers for components, pipelines and heuristic sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable
from uuid import UUID, uuid4

from pessimism.core.types import (
    ComponentType,
    HeuristicType,
    Network,
    PipelineType,
    RegisterType,
)

NIL_UUID = UUID(int=0)

_SHORT_POSITIONS = (0, 1, 2, 2, 3, 4, 5, 6, 7)


def short_string(uid: UUID) -> str:
    """Compact decimal rendering of the leading bytes of a UUID."""
    raw = uid.bytes
    return "".join(str(raw[position]) for position in _SHORT_POSITIONS)


class _PID(bytes):
    """Fixed-length byte sequence encoding enumerated identifier parts."""

    size: ClassVar[int] = 0

    def __new__(cls, data: Iterable[int] | None = None):
        if data is None:
            raw = bytes(cls.size)
        elif isinstance(data, int):
            raise TypeError(f"{cls.__name__} expects a byte sequence, not an int")
        else:
            raw = bytes(data)
        if len(raw) != cls.size:
            raise ValueError(f"{cls.__name__} requires {cls.size} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class ComponentPID(_PID):
    """Network, pipeline type, component type and register type of a component."""

    size = 4

    def __str__(self) -> str:
        return ":".join(
            (
                str(Network.from_code(self[0])),
                str(PipelineType.from_code(self[1])),
                str(ComponentType.from_code(self[2])),
                str(RegisterType.from_code(self[3])),
            )
        )


class PipelinePID(_PID):
    """Pipeline type followed by the first and last component PIDs."""

    size = 9

    def __str__(self) -> str:
        return (
            f"{PipelineType.from_code(self[0])}::"
            f"{ComponentPID(self[1:5])}::{ComponentPID(self[5:9])}"
        )


class SessionPID(_PID):
    """Network, pipeline type and heuristic type of a session."""

    size = 3

    def network(self) -> Network:
        """Network encoded in the PID."""
        return Network.from_code(self[0])

    def pipeline_type(self) -> PipelineType:
        """Pipeline type encoded in the PID."""
        return PipelineType.from_code(self[1])

    def heuristic_type(self) -> HeuristicType:
        """Heuristic type encoded in the PID."""
        return HeuristicType.from_code(self[2])

    def __str__(self) -> str:
        return f"{self.network()}:{self.pipeline_type()}:{self.heuristic_type()}"


@dataclass(frozen=True)
class CUUID:
    """Unique identifier of an ETL component."""

    pid: ComponentPID
    uuid: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.pid, ComponentPID):
            object.__setattr__(self, "pid", ComponentPID(self.pid))

    def component_type(self) -> ComponentType:
        """Component type encoded in the PID."""
        return ComponentType.from_code(self.pid[2])

    def __str__(self) -> str:
        return f"{self.pid}::{short_string(self.uuid)}"


@dataclass(frozen=True)
class PUUID:
    """Unique identifier of an ETL pipeline."""

    pid: PipelinePID
    uuid: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.pid, PipelinePID):
            object.__setattr__(self, "pid", PipelinePID(self.pid))

    def pipeline_type(self) -> PipelineType:
        """Pipeline type encoded in the PID."""
        return PipelineType.from_code(self.pid[0])

    def network_type(self) -> Network:
        """Network of the first component encoded in the PID."""
        return Network.from_code(self.pid[1])

    def __str__(self) -> str:
        return f"{self.pid}:::{short_string(self.uuid)}"


@dataclass(frozen=True)
class SUUID:
    """Unique identifier of a heuristic session."""

    pid: SessionPID
    uuid: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.pid, SessionPID):
            object.__setattr__(self, "pid", SessionPID(self.pid))

    def __str__(self) -> str:
        return f"{self.pid}::{short_string(self.uuid)}"


def nil_cuuid() -> CUUID:
    """Zeroed component identifier."""
    return CUUID(ComponentPID(), NIL_UUID)


def nil_puuid() -> PUUID:
    """Zeroed pipeline identifier."""
    return PUUID(PipelinePID(), NIL_UUID)


def nil_suuid() -> SUUID:
    """Zeroed session identifier."""
    return SUUID(SessionPID(), NIL_UUID)


def make_cuuid(pt: int, ct: int, rt: int, network: int) -> CUUID:
    """Build a component identifier with a random UUID."""
    pid = ComponentPID((int(network), int(pt), int(ct), int(rt)))
    return CUUID(pid, uuid4())


def make_puuid(pt: int, first: CUUID, last: CUUID) -> PUUID:
    """Build a pipeline identifier from its first and last components."""
    pid = PipelinePID(bytes((int(pt),)) + bytes(first.pid) + bytes(last.pid))
    return PUUID(pid, uuid4())


def make_suuid(network: int, pt: int, ht: int) -> SUUID:
    """Build a heuristic session identifier with a random UUID."""
    pid = SessionPID((int(network), int(pt), int(ht)))
    return SUUID(pid, uuid4())