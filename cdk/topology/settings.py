"""
Deployment settings.

Loaded from CDK context first, then the CDK_DEFAULT_* environment variables
the CDK CLI exports, then defaults.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from topology.errors import SettingsError
from topology.policy import DEFAULT_RATE_LIMIT

CDK_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROJECT_ROOT = os.path.dirname(CDK_ROOT)

# CloudFront only accepts web ACLs created in this region
EDGE_REGION = "us-east-1"

ALL_ORIGINS = ("*",)


@dataclass(frozen=True)
class DeploymentSettings:
    """
    Attributes:
        account: Target account, None for environment-agnostic synth
        region: Region of the API and site stacks
        edge_region: Region of the WAF stack
        rate_limit: Requests per source IP before the WAF blocks
        cors_allow_origins: Origins allowed by the API preflight response
        asset_dir: Static site directory published to the bucket
        functions_dir: Directory packaged as Lambda code
    """
    account: Optional[str] = None
    region: str = "us-east-1"
    edge_region: str = EDGE_REGION
    rate_limit: int = DEFAULT_RATE_LIMIT
    cors_allow_origins: tuple[str, ...] = ALL_ORIGINS
    asset_dir: str = field(default=os.path.join(PROJECT_ROOT, "frontend"))
    functions_dir: str = field(default=os.path.join(PROJECT_ROOT, "functions"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "cors_allow_origins", tuple(self.cors_allow_origins))
        if not self.region or not self.edge_region:
            raise SettingsError("region and edge_region are required")
        if not self.cors_allow_origins:
            raise SettingsError("cors_allow_origins must name at least one origin")
        # API Gateway preflight takes either every origin or a list of specific ones
        if "*" in self.cors_allow_origins and len(self.cors_allow_origins) > 1:
            raise SettingsError(
                f"cors_allow_origins cannot mix '*' with specific origins: {', '.join(self.cors_allow_origins)}"
            )

    @property
    def cross_region(self) -> bool:
        return self.region != self.edge_region


def _context_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"context value {key!r} must be an integer, got {value!r}") from e


def _context_list(value: Any) -> tuple[str, ...]:
    # `cdk -c key=a,b` arrives as a string, cdk.json values as lists
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple(value)


def load_settings(node) -> DeploymentSettings:
    """
    Build settings for a construct tree.

    Args:
        node: Construct node of the app (`app.node`)

    Raises:
        SettingsError: If a context value has the wrong shape
    """
    region = node.try_get_context("region") or os.getenv("CDK_DEFAULT_REGION", "us-east-1")
    edge_region = node.try_get_context("edge_region") or EDGE_REGION
    rate_limit = node.try_get_context("rate_limit")
    origins = node.try_get_context("cors_allow_origins")

    return DeploymentSettings(
        account=node.try_get_context("account") or os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=region,
        edge_region=edge_region,
        rate_limit=_context_int(rate_limit, "rate_limit") if rate_limit is not None else DEFAULT_RATE_LIMIT,
        cors_allow_origins=_context_list(origins) if origins else ALL_ORIGINS,
    )
