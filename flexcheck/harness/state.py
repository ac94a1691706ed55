"""Read access to Terraform state as printed by ``terraform show -json``."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from flexcheck.core.exceptions import StateError


@dataclass(frozen=True, slots=True)
class ResourceState:
    """One managed resource instance from the state."""

    address: str
    type: str
    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        value = self.attributes.get("id")
        return "" if value is None else str(value)

    def attribute(self, path: str) -> Any:
        """Look up a nested attribute with dot notation, e.g. ``parameters.zone``.

        Numeric parts index into lists. Returns None when any part is missing.
        """
        current: Any = self.attributes
        for part in path.split("."):
            match current:
                case list() if part.isdigit():
                    index = int(part)
                    current = current[index] if index < len(current) else None
                case Mapping():
                    current = current.get(part)
                case _:
                    return None
        return current


def _walk(module: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    yield from module.get("resources", [])
    for child in module.get("child_modules", []):
        yield from _walk(child)


@dataclass(frozen=True, slots=True)
class State:
    """Managed resources of a state snapshot, keyed by address."""

    resources: Mapping[str, ResourceState] = field(default_factory=dict)

    @classmethod
    def from_show_json(cls, payload: Mapping[str, Any]) -> State:
        root = payload.get("values", {}).get("root_module", {})
        resources: dict[str, ResourceState] = {}
        for raw in _walk(root):
            # Data sources are read-only and never part of a check.
            if raw.get("mode", "managed") != "managed":
                continue
            resource = ResourceState(
                address=raw["address"],
                type=raw.get("type", ""),
                name=raw.get("name", ""),
                attributes=raw.get("values") or {},
            )
            resources[resource.address] = resource
        return cls(resources=resources)

    def __contains__(self, address: object) -> bool:
        return address in self.resources

    def __len__(self) -> int:
        return len(self.resources)

    def resource(self, address: str) -> ResourceState:
        try:
            return self.resources[address]
        except KeyError:
            raise StateError(f"resource {address!r} not in state") from None

    def primary_id(self, address: str) -> str:
        resource = self.resource(address)
        if not resource.id:
            raise StateError(f"resource {address!r} does not have an ID set")
        return resource.id

    def resources_of_type(self, resource_type: str) -> list[ResourceState]:
        return [r for r in self.resources.values() if r.type == resource_type]
