"""
Deployment plan: the full set of declarations the three stacks are built from.

A plan is derived from settings on every synth and never mutated. Building it
runs every validation, so a bad declaration fails before any stack exists.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from topology.behaviors import BehaviorSet, DistributionBehavior, ObjectStore, OriginKind
from topology.errors import RouteConflictError
from topology.policy import Action, FilterPolicy, FilterRule, default_policy
from topology.routes import Endpoint, Route, RouteTable
from topology.settings import DeploymentSettings

logger = logging.getLogger(__name__)

API_PATH_PATTERN = "/api/*"


@dataclass(frozen=True)
class DeploymentPlan:
    settings: DeploymentSettings
    filter_policy: FilterPolicy
    endpoints: tuple[Endpoint, ...]
    route_table: RouteTable
    object_store: ObjectStore
    behaviors: BehaviorSet

    def __post_init__(self) -> None:
        object.__setattr__(self, "endpoints", tuple(self.endpoints))
        identifiers = [e.identifier for e in self.endpoints]
        if len(set(identifiers)) != len(identifiers):
            raise RouteConflictError(f"duplicate endpoint identifiers in {identifiers}")
        missing = self.route_table.endpoints - set(identifiers)
        if missing:
            raise RouteConflictError(f"routes target undeclared endpoints: {', '.join(sorted(missing))}")

    def endpoint(self, identifier: str) -> Endpoint:
        for endpoint in self.endpoints:
            if endpoint.identifier == identifier:
                return endpoint
        raise KeyError(identifier)


def build_plan(settings: DeploymentSettings,
               rules: Optional[Iterable[FilterRule]] = None) -> DeploymentPlan:
    """
    Declare the topology for `settings`.

    Args:
        settings: Loaded deployment settings
        rules: Replacement WAF rules; the rate limit rule is used when omitted

    Raises:
        TopologyError: If any declaration is invalid
    """
    if rules is None:
        policy = default_policy(settings.rate_limit)
    else:
        policy = FilterPolicy(default_action=Action.ALLOW, rules=tuple(rules))

    endpoints = (
        Endpoint("ApiHandler1", "sample_lambda_1.handler", settings.functions_dir),
        Endpoint("ApiHandler2", "sample_lambda_2.handler", settings.functions_dir),
    )
    route_table = RouteTable((
        Route("/api/lambda-1", "GET", "ApiHandler1"),
        Route("/api/lambda-2", "GET", "ApiHandler2"),
    ))
    behaviors = BehaviorSet((
        DistributionBehavior("*", OriginKind.OBJECT_STORE),
        # API responses are per request and must never be served from the edge cache
        DistributionBehavior(API_PATH_PATTERN, OriginKind.API_ENDPOINT, cacheable=False),
    ))

    plan = DeploymentPlan(
        settings=settings,
        filter_policy=policy,
        endpoints=endpoints,
        route_table=route_table,
        object_store=ObjectStore(),
        behaviors=behaviors,
    )
    logger.info(
        "Deployment plan: %d WAF rule(s), %d route(s), %d behaviour(s), region=%s edge_region=%s",
        len(policy.rules), len(route_table.routes), len(behaviors.behaviors),
        settings.region, settings.edge_region,
    )
    return plan
