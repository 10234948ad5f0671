from aws_cdk import (
    Stack,
    aws_wafv2 as wafv2,
)
from constructs import Construct

from topology.policy import Action, FilterPolicy, FilterRule


def _visibility(metric_name: str) -> wafv2.CfnWebACL.VisibilityConfigProperty:
    return wafv2.CfnWebACL.VisibilityConfigProperty(
        sampled_requests_enabled=True,
        cloud_watch_metrics_enabled=True,
        metric_name=metric_name,
    )


def _rule_action(action: Action) -> wafv2.CfnWebACL.RuleActionProperty:
    if action is Action.ALLOW:
        return wafv2.CfnWebACL.RuleActionProperty(allow={})
    return wafv2.CfnWebACL.RuleActionProperty(block={})


def _rule(rule: FilterRule) -> wafv2.CfnWebACL.RuleProperty:
    return wafv2.CfnWebACL.RuleProperty(
        name=rule.name,
        priority=rule.priority,
        statement=wafv2.CfnWebACL.StatementProperty(
            rate_based_statement=wafv2.CfnWebACL.RateBasedStatementProperty(
                limit=rule.match.limit,
                aggregate_key_type=rule.match.aggregate_key,
            ),
        ),
        action=_rule_action(rule.action),
        visibility_config=_visibility(rule.name),
    )


class WafStack(Stack):
    """Global web ACL for the CloudFront distribution. Must be deployed to us-east-1."""

    def __init__(self, scope: Construct, construct_id: str,
                 policy: FilterPolicy,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if policy.default_action is Action.ALLOW:
            default_action = wafv2.CfnWebACL.DefaultActionProperty(allow={})
        else:
            default_action = wafv2.CfnWebACL.DefaultActionProperty(block={})

        self.web_acl = wafv2.CfnWebACL(self, "WebACL",
                                       scope="CLOUDFRONT",
                                       default_action=default_action,
                                       visibility_config=_visibility("WebACL"),
                                       rules=[_rule(rule) for rule in policy.ordered_rules])

        # Read-only handle for the site stack
        self.web_acl_arn = self.web_acl.attr_arn
