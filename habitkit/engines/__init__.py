"""Engine modules for HabitKit.

Contains the pure computation engines:
- schedule_engine: Weekday-mask recurrence and RRULE generation
- ledger_engine: Date-keyed completion entries (set_completion)
- adherence_engine: Per-habit streaks and completion rates
- analytics_engine: Cross-habit rankings, averages and totals
- lifecycle_engine: Archive/lock/delete transitions and guards
"""

# Use relative imports within package to avoid mypy module resolution issues
from .adherence_engine import AdherenceEngine
from .analytics_engine import AnalyticsEngine
from .ledger_engine import UNSET, LedgerEngine
from .lifecycle_engine import LifecycleEngine
from .schedule_engine import ScheduleEngine

__all__ = [
    "UNSET",
    "AdherenceEngine",
    "AnalyticsEngine",
    "LedgerEngine",
    "LifecycleEngine",
    "ScheduleEngine",
]
