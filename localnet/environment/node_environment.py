from __future__ import annotations

from typing import Dict, Iterator

import msgspec


class NodeEnvironment(msgspec.Struct, frozen=True):
    """
    The configuration handed to one node process, as an immutable,
    ordered set of key/value pairs.
    """

    node_id: str
    variables: tuple[tuple[str, str], ...]

    @classmethod
    def from_pairs(
        cls,
        node_id: str,
        pairs: Dict[str, str],
    ) -> NodeEnvironment:
        return cls(
            node_id=node_id,
            variables=tuple(pairs.items()),
        )

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.variables:
            if name == key:
                return value

        return default

    def keys(self) -> list[str]:
        return [name for name, _ in self.variables]

    def to_dict(self) -> Dict[str, str]:
        return dict(self.variables)

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)

        return value

    def __contains__(self, key: str) -> bool:
        return any(name == key for name, _ in self.variables)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.variables)
