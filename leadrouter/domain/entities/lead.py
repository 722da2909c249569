"""Lead entity — one inbound loan inquiry awaiting assignment."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from leadrouter.domain.exceptions import InvalidLeadError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Lead:
    amount: float | None = None
    purpose: str | None = None
    region: str | None = None
    language: str | None = None
    requested_at: datetime = field(default_factory=_utcnow)

    def validate(self) -> Lead:
        """Reject malformed input instead of coercing it.

        Returns the lead itself so callers can chain ``Lead(...).validate()``.
        """
        if self.amount is not None:
            if isinstance(self.amount, bool) or not isinstance(self.amount, (int, float)):
                raise InvalidLeadError(f"Loan amount must be a number, got {self.amount!r}")
            if not math.isfinite(self.amount):
                raise InvalidLeadError("Loan amount must be finite")
            if self.amount < 0:
                raise InvalidLeadError(f"Loan amount cannot be negative: {self.amount}")
        if self.purpose is not None and not self.purpose.strip():
            raise InvalidLeadError("Loan purpose cannot be blank")
        return self

    def has_attributes(self) -> bool:
        """True when the lead carries anything weighted matching can use."""
        return self.amount is not None or self.purpose is not None
