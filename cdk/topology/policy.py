"""
Edge filtering policy for the CloudFront web ACL.

The policy is plain data: the WAF stack turns it into CfnWebACL properties.
Validation happens when the policy is constructed, so an invalid policy can
never reach a stack.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final

from topology.errors import PolicyValidationError

DEFAULT_RATE_LIMIT: Final[int] = 2000

# WAFv2 accepts rate-based limits in this range
MIN_RATE_LIMIT: Final[int] = 10
MAX_RATE_LIMIT: Final[int] = 2_000_000_000

AGGREGATE_KEYS: Final[frozenset[str]] = frozenset({"IP", "FORWARDED_IP"})


class Action(str, Enum):
    ALLOW = "allow"
    BLOCK = "block"


@dataclass(frozen=True)
class RateLimit:
    """
    Rate-based match condition.

    Attributes:
        limit: Requests allowed per aggregation key in the evaluation window
        aggregate_key: What requests are counted against (source IP by default)
    """
    limit: int
    aggregate_key: str = "IP"

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise PolicyValidationError(f"rate limit must be an integer, got {self.limit!r}")
        if not MIN_RATE_LIMIT <= self.limit <= MAX_RATE_LIMIT:
            raise PolicyValidationError(
                f"rate limit {self.limit} outside {MIN_RATE_LIMIT}..{MAX_RATE_LIMIT}"
            )
        if self.aggregate_key not in AGGREGATE_KEYS:
            raise PolicyValidationError(f"unsupported aggregate key {self.aggregate_key!r}")


@dataclass(frozen=True)
class FilterRule:
    """
    One rule of the policy. Lower priority is evaluated first.

    Attributes:
        name: Rule name, unique within the policy; also used as metric name
        priority: Evaluation order
        match: Match condition
        action: What happens to a matching request
    """
    name: str
    priority: int
    match: RateLimit
    action: Action = Action.BLOCK

    def __post_init__(self) -> None:
        if not self.name:
            raise PolicyValidationError("rule name must not be empty")
        if isinstance(self.priority, bool) or not isinstance(self.priority, int) or self.priority < 0:
            raise PolicyValidationError(
                f"rule {self.name!r}: priority must be a non-negative integer, got {self.priority!r}"
            )
        if not isinstance(self.action, Action):
            raise PolicyValidationError(f"rule {self.name!r}: unknown action {self.action!r}")


@dataclass(frozen=True)
class FilterPolicy:
    """
    Default action plus an ordered set of rules.

    Raises:
        PolicyValidationError: on a missing default action, duplicate rule
            names or duplicate priorities
    """
    default_action: Action
    rules: tuple[FilterRule, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.default_action, Action):
            raise PolicyValidationError(f"policy needs a default action, got {self.default_action!r}")

        # Normalise lists passed by callers; the instance stays immutable
        object.__setattr__(self, "rules", tuple(self.rules))

        names = [rule.name for rule in self.rules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise PolicyValidationError(f"duplicate rule names: {', '.join(duplicates)}")

        seen: dict[int, str] = {}
        for rule in self.rules:
            if rule.priority in seen:
                raise PolicyValidationError(
                    f"rules {seen[rule.priority]!r} and {rule.name!r} share priority {rule.priority}"
                )
            seen[rule.priority] = rule.name

    @property
    def ordered_rules(self) -> tuple[FilterRule, ...]:
        return tuple(sorted(self.rules, key=lambda rule: rule.priority))


def default_policy(rate_limit: int = DEFAULT_RATE_LIMIT) -> FilterPolicy:
    """Default allow, block any source IP above `rate_limit` requests."""
    return FilterPolicy(
        default_action=Action.ALLOW,
        rules=(
            FilterRule(
                name="RateLimitRule",
                priority=1,
                match=RateLimit(limit=rate_limit, aggregate_key="IP"),
                action=Action.BLOCK,
            ),
        ),
    )
