"""Port interface for the agent directory."""

from abc import ABC, abstractmethod

from leadrouter.domain.entities.agent import Agent


class AgentRepository(ABC):
    @abstractmethod
    async def save(self, agent: Agent) -> Agent:
        ...

    @abstractmethod
    async def get_by_id(self, agent_id: int) -> Agent | None:
        ...

    @abstractmethod
    async def get_by_contact(self, contact: str) -> Agent | None:
        ...

    @abstractmethod
    async def get_active(self) -> list[Agent]:
        """Return a snapshot of all agents with status ``active``."""
        ...

    @abstractmethod
    async def get_all(self) -> list[Agent]:
        ...
