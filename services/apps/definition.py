"""Static app metadata: groups, their shape and display labels."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from services.positions.models import ContractType, Network


@dataclass(frozen=True)
class AppGroup:
    id: str
    type: ContractType
    label: str


@dataclass(frozen=True)
class AppDefinition:
    id: str
    name: str
    groups: Dict[str, AppGroup] = field(hash=False, compare=False)
    networks: Tuple[Network, ...] = ()

    def group_label(self, group_id: str) -> Optional[str]:
        for group in self.groups.values():
            if group.id == group_id:
                return group.label
        return None

    def group_ids(self) -> List[str]:
        return [group.id for group in self.groups.values()]


class AppDefinitionRegistry:
    def __init__(self):
        self._definitions: Dict[str, AppDefinition] = {}

    def register(self, definition: AppDefinition) -> None:
        if definition.id in self._definitions:
            raise ValueError(f"App {definition.id} is already defined")
        self._definitions[definition.id] = definition

    def get(self, app_id: str) -> Optional[AppDefinition]:
        return self._definitions.get(app_id)

    def __iter__(self):
        return iter(self._definitions.values())
