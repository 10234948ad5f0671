from aws_cdk import Stack
from constructs import Construct


class CdkServerlessWebAppPatternStack(Stack):
    """
    Deprecated, kept so existing deployments of this stack name keep resolving.

    Resources moved to WafStack, BackendStack and FrontendStack; do not add any here.
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
