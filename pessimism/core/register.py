"""Data registers describing what ETL components produce and consume."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from pessimism.core.ids import PUUID, make_cuuid, make_puuid
from pessimism.core.state import StateKey
from pessimism.core.types import ComponentType, Network, PipelineType, RegisterType


@dataclass
class DataRegister:
    """An ETL data type together with the component that produces it."""

    data_type: RegisterType
    component_type: ComponentType
    addressing: bool = False
    sk: StateKey | None = None
    component_constructor: Callable[..., Any] | None = None
    dependencies: list[RegisterType] = field(default_factory=list)

    def state_key(self) -> StateKey:
        """Return a fresh copy of the register's state key."""
        if self.sk is None:
            raise ValueError(f"data register {self.data_type} has no state key")
        return self.sk.clone()

    def stateful(self) -> bool:
        """Whether the register keeps state."""
        return self.sk is not None


@dataclass
class RegisterDependencyPath:
    """Inclusive, acyclic sequence of register dependencies."""

    path: list[DataRegister] = field(default_factory=list)

    def generate_puuid(self, pt: PipelineType, network: Network) -> PUUID:
        """Build a pipeline identifier spanning the first and last registers."""
        if not self.path:
            raise ValueError("cannot generate a pipeline UUID for an empty path")
        first, last = self.path[0], self.path[-1]
        first_id = make_cuuid(pt, first.component_type, first.data_type, network)
        last_id = make_cuuid(pt, last.component_type, last.data_type, network)
        return make_puuid(pt, first_id, last_id)