"""
config/verdicts.py
──────────────────
Closed sets for verdicts, service statuses and menu priorities, plus their
display colours and sort order.
"""

from enum import Enum


class ActionCategory(str, Enum):
    """Family-independent action bucket consumed by pricing and ranking."""
    REPLACE = "REPLACE"
    REPAIR = "REPAIR"
    UPGRADE = "UPGRADE"
    MAINTAIN = "MAINTAIN"
    PASS = "PASS"


class HeaterBadge(str, Enum):
    CRITICAL = "CRITICAL"
    REPLACE = "REPLACE"
    SERVICE = "SERVICE"
    MONITOR = "MONITOR"
    OPTIMAL = "OPTIMAL"


class SoftenerAction(str, Enum):
    MONITOR = "MONITOR"
    VALVE_REBUILD = "VALVE_REBUILD"
    RESIN_DETOX = "RESIN_DETOX"
    REBED_OR_REPLACE = "REBED_OR_REPLACE"
    REPLACE_UNIT = "REPLACE_UNIT"
    UPGRADE_EFFICIENCY = "UPGRADE_EFFICIENCY"


class SoftenerBadge(str, Enum):
    HEALTHY = "HEALTHY"
    SEAL_WEAR = "SEAL_WEAR"
    RESIN_DEGRADED = "RESIN_DEGRADED"
    RESIN_FAILURE = "RESIN_FAILURE"
    MECHANICAL_FAILURE = "MECHANICAL_FAILURE"
    HIGH_WASTE = "HIGH_WASTE"
    CRITICAL = "CRITICAL"


class BadgeColor(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"


class ServiceStatus(str, Enum):
    OPTIMAL = "optimal"
    ADVISORY = "advisory"
    DUE = "due"
    CRITICAL = "critical"
    LOCKOUT = "lockout"
    IMPOSSIBLE = "impossible"
    RUN_TO_FAILURE = "run_to_failure"


class AnodeStatus(str, Enum):
    PROTECTED = "protected"
    INSPECT = "inspect"
    REPLACE = "replace"
    NAKED = "naked"


class ServicePriority(str, Enum):
    CRITICAL = "critical"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class BudgetUrgency(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


SOFTENER_ACTION_CATEGORY: dict[str, ActionCategory] = {
    SoftenerAction.MONITOR: ActionCategory.PASS,
    SoftenerAction.VALVE_REBUILD: ActionCategory.REPAIR,
    SoftenerAction.RESIN_DETOX: ActionCategory.MAINTAIN,
    SoftenerAction.REBED_OR_REPLACE: ActionCategory.REPLACE,
    SoftenerAction.REPLACE_UNIT: ActionCategory.REPLACE,
    SoftenerAction.UPGRADE_EFFICIENCY: ActionCategory.UPGRADE,
}

# Badges that mean "nothing to plan for"
QUIET_BADGES = frozenset({HeaterBadge.OPTIMAL.value})

# Sort order for menu items (lower = shown first)
PRIORITY_ORDER: dict[str, int] = {
    ServicePriority.CRITICAL: 0,
    ServicePriority.RECOMMENDED: 1,
    ServicePriority.OPTIONAL: 2,
}

# Severity ordering for statuses (higher = worse)
STATUS_ORDER: dict[str, int] = {
    ServiceStatus.OPTIMAL: 0,
    ServiceStatus.ADVISORY: 1,
    ServiceStatus.DUE: 2,
    ServiceStatus.CRITICAL: 3,
    ServiceStatus.IMPOSSIBLE: 4,
    ServiceStatus.RUN_TO_FAILURE: 5,
    ServiceStatus.LOCKOUT: 6,
}

BADGE_COLORS: dict[str, str] = {
    HeaterBadge.CRITICAL: BadgeColor.RED,
    HeaterBadge.REPLACE: BadgeColor.RED,
    HeaterBadge.SERVICE: BadgeColor.ORANGE,
    HeaterBadge.MONITOR: BadgeColor.YELLOW,
    HeaterBadge.OPTIMAL: BadgeColor.GREEN,
    SoftenerBadge.RESIN_FAILURE: BadgeColor.RED,
    SoftenerBadge.MECHANICAL_FAILURE: BadgeColor.RED,
    SoftenerBadge.SEAL_WEAR: BadgeColor.ORANGE,
    SoftenerBadge.RESIN_DEGRADED: BadgeColor.YELLOW,
    SoftenerBadge.HIGH_WASTE: BadgeColor.YELLOW,
    SoftenerBadge.HEALTHY: BadgeColor.GREEN,
}
