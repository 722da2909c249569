"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AgentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    BUSY = "busy"


class LoanPurpose(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    DEBT_CONSOLIDATION = "debt-consolidation"
    HOME_IMPROVEMENT = "home-improvement"
    AUTO = "auto"
    EDUCATION = "education"
    MEDICAL = "medical"
    OTHER = "other"


class Language(str, Enum):
    MALAY = "Malay"
    ENGLISH = "English"
    CHINESE = "Chinese"
    TAMIL = "Tamil"
    OTHER = "Other"


class AssignmentStrategy(str, Enum):
    WEIGHTED = "weighted"
    ROUND_ROBIN = "round_robin"


class AssignmentStatus(str, Enum):
    OPEN = "open"
    CONVERTED = "converted"
    LOST = "lost"
    EXPIRED = "expired"


class NoAgentReason(str, Enum):
    NO_CANDIDATES = "no_candidates"
    CLAIM_RACE_EXHAUSTED = "claim_race_exhausted"


class CapacityState(str, Enum):
    ACCEPTING = "accepting"
    FULL = "full"
