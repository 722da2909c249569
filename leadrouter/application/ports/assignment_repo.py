"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from leadrouter.domain.entities.assignment import Assignment
from leadrouter.domain.value_objects.enums import AssignmentStatus


class AssignmentRepository(ABC):
    @abstractmethod
    async def save(self, assignment: Assignment) -> Assignment:
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        ...

    @abstractmethod
    async def close(
        self, assignment_id: int, status: AssignmentStatus, closed_at: datetime
    ) -> bool:
        """Atomically move an assignment from ``open`` to *status*.

        Returns True only for the caller that performed the transition.
        """
        ...

    @abstractmethod
    async def get_open_before(self, cutoff: datetime) -> list[Assignment]:
        """Open assignments created strictly before *cutoff*."""
        ...

    @abstractmethod
    async def get_recent(self, limit: int = 50) -> list[Assignment]:
        ...
