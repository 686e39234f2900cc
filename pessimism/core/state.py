"""Keys into the shared state store."""

from __future__ import annotations

from dataclasses import dataclass

from pessimism.core.ids import PUUID
from pessimism.core.types import RegisterType


@dataclass
class StateKey:
    """Key in the state store, optionally scoped to a pipeline."""

    prefix: RegisterType
    key_id: str
    nesting: bool = False
    puuid: PUUID | None = None

    def __post_init__(self) -> None:
        self.prefix = RegisterType.from_code(self.prefix)

    def clone(self) -> StateKey:
        """Return a copy of the key."""
        return StateKey(
            prefix=self.prefix,
            key_id=self.key_id,
            nesting=self.nesting,
            puuid=self.puuid,
        )

    def is_nested(self) -> bool:
        """Whether the key maps to a collection of further state keys."""
        return self.nesting

    def set_puuid(self, puuid: PUUID) -> None:
        """Scope the key to a pipeline; a key can only be scoped once."""
        if self.puuid is not None:
            raise ValueError(f"state key already has a pipeline UUID {self.puuid}")
        self.puuid = puuid

    def __str__(self) -> str:
        scope = "" if self.puuid is None else str(self.puuid)
        return f"{scope}-{self.prefix}-{self.key_id}"


def make_state_key(prefix: RegisterType, key_id: str, nesting: bool) -> StateKey:
    """Build a minimal state key from a prefix and an identifier."""
    return StateKey(prefix=prefix, key_id=key_id, nesting=nesting)