# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from core.models import Allocation, Project, Resource, Scenario


class ResourceRepository(ABC):
    @abstractmethod
    def add(self, resource: Resource) -> None: ...

    @abstractmethod
    def update(self, resource: Resource) -> None: ...

    @abstractmethod
    def delete(self, resource_id: str) -> None: ...

    @abstractmethod
    def bump_version(self, resource_id: str, expected_version: int | None = None) -> None: ...

    @abstractmethod
    def get(self, resource_id: str) -> Optional[Resource]: ...

    @abstractmethod
    def list_all(self) -> List[Resource]: ...


class ProjectRepository(ABC):
    @abstractmethod
    def add(self, project: Project) -> None: ...

    @abstractmethod
    def update(self, project: Project) -> None: ...

    @abstractmethod
    def delete(self, project_id: str) -> None: ...

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def list_all(self) -> List[Project]: ...


class AllocationRepository(ABC):
    @abstractmethod
    def add(self, allocation: Allocation) -> None: ...

    @abstractmethod
    def update(self, allocation: Allocation) -> None: ...

    @abstractmethod
    def delete(self, allocation_id: str) -> None: ...

    @abstractmethod
    def get(self, allocation_id: str) -> Optional[Allocation]: ...

    @abstractmethod
    def list_all(self) -> List[Allocation]: ...

    @abstractmethod
    def list_by_resource(self, resource_id: str) -> List[Allocation]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Allocation]: ...


class ScenarioRepository(ABC):
    @abstractmethod
    def add(self, scenario: Scenario) -> None: ...

    @abstractmethod
    def update(self, scenario: Scenario) -> None: ...

    @abstractmethod
    def delete(self, scenario_id: str) -> None: ...

    @abstractmethod
    def get(self, scenario_id: str) -> Optional[Scenario]: ...

    @abstractmethod
    def list_all(self) -> List[Scenario]: ...


class SettingsRepository(ABC):
    @abstractmethod
    def get_all(self) -> Dict[str, str]: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...
