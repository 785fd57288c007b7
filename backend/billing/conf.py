from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from django.conf import settings
from django.utils import timezone


@dataclass(frozen=True)
class BillingConfig:
    """Explicit configuration for the bill engine.

    Built from Django settings in production via :meth:`from_settings`;
    tests construct it directly with a fixed ``clock``.
    """
    clock: Callable[[], datetime] = field(default=timezone.now)
    default_payment_day: int = 1
    generate_on_login: bool = True
    generate_on_assignment: bool = True
    task_soft_time_limit: int = 300

    @classmethod
    def from_settings(cls, **overrides) -> "BillingConfig":
        values = dict(
            default_payment_day=getattr(settings, "BILLING_DEFAULT_PAYMENT_DAY", 1),
            generate_on_login=getattr(settings, "BILLING_GENERATE_ON_LOGIN", True),
            generate_on_assignment=getattr(settings, "BILLING_GENERATE_ON_ASSIGNMENT", True),
            task_soft_time_limit=getattr(settings, "BILLING_TASK_SOFT_TIME_LIMIT", 300),
        )
        values.update(overrides)
        return cls(**values)

    def today(self):
        """Local calendar date of the configured clock."""
        now = self.clock()
        if timezone.is_aware(now):
            now = timezone.localtime(now)
        return now.date()
