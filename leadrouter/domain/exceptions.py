"""Domain exceptions."""


class LeadRoutingError(Exception):
    """Base class for lead routing failures."""


class InvalidLeadError(LeadRoutingError, ValueError):
    """Lead input is malformed and was rejected before scoring."""


class MalformedAgentError(LeadRoutingError, ValueError):
    """Agent record holds values the scoring function cannot interpret."""

    def __init__(self, agent_id: int | None, message: str):
        super().__init__(f"Agent {agent_id}: {message}")
        self.agent_id = agent_id


class AgentNotFoundError(LeadRoutingError, LookupError):
    def __init__(self, agent_id: int):
        super().__init__(f"Agent {agent_id} not found")
        self.agent_id = agent_id


class AssignmentNotFoundError(LeadRoutingError, LookupError):
    def __init__(self, assignment_id: int):
        super().__init__(f"Assignment {assignment_id} not found")
        self.assignment_id = assignment_id
