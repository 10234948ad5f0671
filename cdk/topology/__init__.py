"""Validated descriptors for the serverless web app topology."""

from topology.behaviors import BehaviorSet, DistributionBehavior, ObjectStore, OriginKind, ProtocolPolicy
from topology.errors import (
    BehaviorConfigError,
    PolicyValidationError,
    RouteConflictError,
    SettingsError,
    TopologyError,
)
from topology.graph import DeploymentPlan, build_plan
from topology.policy import Action, FilterPolicy, FilterRule, RateLimit, default_policy
from topology.routes import Endpoint, Route, RouteTable
from topology.settings import DeploymentSettings, load_settings

__all__ = [
    "Action",
    "BehaviorConfigError",
    "BehaviorSet",
    "DeploymentPlan",
    "DeploymentSettings",
    "DistributionBehavior",
    "Endpoint",
    "FilterPolicy",
    "FilterRule",
    "ObjectStore",
    "OriginKind",
    "PolicyValidationError",
    "ProtocolPolicy",
    "RateLimit",
    "Route",
    "RouteConflictError",
    "RouteTable",
    "SettingsError",
    "TopologyError",
    "build_plan",
    "default_policy",
    "load_settings",
]
