"""
Wires the three stacks together: WAF → Backend → Frontend.

The WAF and backend stacks have no inputs from each other; the frontend stack
receives both handles as constructor arguments. Those references are what
orders the deployment, so no explicit stack dependencies are declared.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import aws_cdk as cdk
from constructs import Construct

from stacks.api_stack import ApiStack
from stacks.legacy_stack import CdkServerlessWebAppPatternStack
from stacks.site_stack import SiteStack
from stacks.waf_stack import WafStack
from topology.graph import DeploymentPlan, build_plan
from topology.policy import FilterRule
from topology.settings import load_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deployment:
    waf: WafStack
    backend: ApiStack
    frontend: SiteStack
    legacy: CdkServerlessWebAppPatternStack


def compose(app: Construct, plan: DeploymentPlan) -> Deployment:
    """Instantiate every stack of `plan` under `app`."""
    settings = plan.settings
    env = cdk.Environment(account=settings.account, region=settings.region)
    edge_env = cdk.Environment(account=settings.account, region=settings.edge_region)

    # WAF for CloudFront (edge region)
    waf = WafStack(app, "WafStack",
                   env=edge_env,
                   policy=plan.filter_policy)

    # Lambda + API Gateway
    backend = ApiStack(app, "BackendStack",
                       env=env,
                       endpoints=plan.endpoints,
                       route_table=plan.route_table,
                       cors_allow_origins=settings.cors_allow_origins)

    # S3 + CloudFront, /api/* forwarded to the backend
    frontend = SiteStack(app, "FrontendStack",
                         env=env,
                         cross_region_references=settings.cross_region,
                         api=backend.api,
                         web_acl_arn=waf.web_acl_arn,
                         object_store=plan.object_store,
                         behaviors=plan.behaviors,
                         asset_dir=settings.asset_dir)

    legacy = CdkServerlessWebAppPatternStack(app, "CdkServerlessWebAppPatternStack", env=env)

    logger.info("Composed stacks: %s", ", ".join(s.stack_name for s in (waf, backend, frontend, legacy)))
    return Deployment(waf=waf, backend=backend, frontend=frontend, legacy=legacy)


def deploy(app: cdk.App, rules: Optional[Iterable[FilterRule]] = None) -> Deployment:
    """
    Load settings, build and validate the plan, then compose the stacks.

    Nothing is added to `app` unless the whole plan is valid.

    Raises:
        TopologyError: If settings or declarations are invalid
    """
    settings = load_settings(app.node)
    plan = build_plan(settings, rules)
    return compose(app, plan)
