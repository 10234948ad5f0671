from aws_cdk import (
    Stack,
    CfnOutput,
    RemovalPolicy,
    aws_apigateway as apigw,
    aws_s3 as s3,
    aws_cloudfront as cf,
    aws_cloudfront_origins as origins,
    aws_s3_deployment as s3deploy,
)
from constructs import Construct

from topology.behaviors import BehaviorSet, DistributionBehavior, ObjectStore, OriginKind, ProtocolPolicy

VIEWER_PROTOCOL_POLICIES = {
    ProtocolPolicy.REDIRECT_TO_HTTPS: cf.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
    ProtocolPolicy.HTTPS_ONLY: cf.ViewerProtocolPolicy.HTTPS_ONLY,
}


class SiteStack(Stack):
    def __init__(self, scope: Construct, construct_id: str,
                 api: apigw.RestApi,
                 web_acl_arn: str,
                 object_store: ObjectStore,
                 behaviors: BehaviorSet,
                 asset_dir: str,
                 distribution_description: str = "Serverless web app",
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Static site bucket (OAC only unless declared public)
        if object_store.private:
            access = dict(public_read_access=False,
                          block_public_access=s3.BlockPublicAccess.BLOCK_ALL)
        else:
            access = dict(public_read_access=True,
                          block_public_access=s3.BlockPublicAccess.BLOCK_ACLS_ONLY)
        if object_store.destroy_on_teardown:
            teardown = dict(removal_policy=RemovalPolicy.DESTROY, auto_delete_objects=True)
        else:
            teardown = dict(removal_policy=RemovalPolicy.RETAIN)

        self.bucket = s3.Bucket(self, "WebsiteBucket",
                                website_index_document=object_store.index_document,
                                website_error_document=object_store.error_document,
                                encryption=s3.BucketEncryption.S3_MANAGED,
                                **access,
                                **teardown)

        # Static site origin, signed by CloudFront through origin access control
        s3_origin = origins.S3BucketOrigin.with_origin_access_control(self.bucket)

        # API origin (execute-api hostname plus stage path)
        api_origin = origins.RestApiOrigin(api)

        self._origins = {
            OriginKind.OBJECT_STORE: s3_origin,
            OriginKind.API_ENDPOINT: api_origin,
        }

        # Distribution
        self.distribution = cf.Distribution(self, "Distribution",
                                            default_behavior=self._behavior(behaviors.default),
                                            additional_behaviors={
                                                b.path_pattern: self._behavior(b) for b in behaviors.additional
                                            },
                                            default_root_object=object_store.index_document,
                                            web_acl_id=web_acl_arn,
                                            comment=distribution_description)

        # Publish the site and flush every edge cache so the new content is served at once
        self.deployment = s3deploy.BucketDeployment(self, "DeployWebsite",
                                                    sources=[s3deploy.Source.asset(asset_dir)],
                                                    destination_bucket=self.bucket,
                                                    distribution=self.distribution,
                                                    distribution_paths=["/*"])

        self.distribution_domain = self.distribution.distribution_domain_name

        CfnOutput(self, "DistributionDomainName",
                  value=self.distribution_domain)

    def _behavior(self, behavior: DistributionBehavior) -> cf.BehaviorOptions:
        if behavior.cacheable:
            cache_policy = cf.CachePolicy.CACHING_OPTIMIZED
        else:
            cache_policy = cf.CachePolicy.CACHING_DISABLED

        # API Gateway rejects requests carrying the distribution's Host header
        origin_request_policy = None
        if behavior.origin is OriginKind.API_ENDPOINT:
            origin_request_policy = cf.OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER

        return cf.BehaviorOptions(
            origin=self._origins[behavior.origin],
            viewer_protocol_policy=VIEWER_PROTOCOL_POLICIES[behavior.protocol],
            cache_policy=cache_policy,
            origin_request_policy=origin_request_policy,
        )
