"""Tests for the S3 + CloudFront stack."""

import dataclasses

import aws_cdk as cdk
import pytest
from aws_cdk import aws_cloudfront as cf
from aws_cdk.assertions import Match, Template

from stacks.composition import compose
from topology.behaviors import BehaviorSet, DistributionBehavior, ObjectStore, OriginKind, ProtocolPolicy
from topology.graph import build_plan
from topology.settings import DeploymentSettings

CACHING_DISABLED = cf.CachePolicy.CACHING_DISABLED.cache_policy_id
CACHING_OPTIMIZED = cf.CachePolicy.CACHING_OPTIMIZED.cache_policy_id


def _distribution_config(template):
    (distribution,) = template.find_resources("AWS::CloudFront::Distribution").values()
    return distribution["Properties"]["DistributionConfig"]


class TestWebsiteBucket:
    """Private object store for the static site."""

    def test_bucket_blocks_public_access(self, site_template):
        site_template.has_resource_properties("AWS::S3::Bucket", {
            "PublicAccessBlockConfiguration": {
                "BlockPublicAcls": True,
                "BlockPublicPolicy": True,
                "IgnorePublicAcls": True,
                "RestrictPublicBuckets": True,
            },
            "WebsiteConfiguration": {
                "IndexDocument": "index.html",
                "ErrorDocument": "error.html",
            },
        })

    def test_bucket_destroyed_with_stack(self, site_template):
        site_template.has_resource("AWS::S3::Bucket", {
            "DeletionPolicy": "Delete",
            "UpdateReplacePolicy": "Delete",
        })

    def test_origin_access_control(self, site_template):
        site_template.resource_count_is("AWS::CloudFront::OriginAccessControl", 1)
        site_template.has_resource_properties("AWS::CloudFront::OriginAccessControl", {
            "OriginAccessControlConfig": Match.object_like({
                "OriginAccessControlOriginType": "s3",
                "SigningBehavior": "always",
            }),
        })


class TestDistribution:
    """Routing behaviours and the attached web ACL."""

    def test_single_distribution(self, site_template):
        site_template.resource_count_is("AWS::CloudFront::Distribution", 1)

    def test_default_root_object(self, site_template):
        assert _distribution_config(site_template)["DefaultRootObject"] == "index.html"

    def test_default_behaviour_is_cacheable(self, site_template):
        default = _distribution_config(site_template)["DefaultCacheBehavior"]
        assert default["ViewerProtocolPolicy"] == "redirect-to-https"
        assert default["CachePolicyId"] == CACHING_OPTIMIZED

    def test_api_behaviour_is_uncachable(self, site_template):
        behaviors = _distribution_config(site_template)["CacheBehaviors"]
        assert [b["PathPattern"] for b in behaviors] == ["/api/*"]
        (api,) = behaviors
        assert api["ViewerProtocolPolicy"] == "redirect-to-https"
        assert api["CachePolicyId"] == CACHING_DISABLED
        assert api["TargetOriginId"] != _distribution_config(site_template)["DefaultCacheBehavior"]["TargetOriginId"]

    def test_two_origins(self, site_template):
        origins = _distribution_config(site_template)["Origins"]
        assert len(origins) == 2
        assert sum(1 for o in origins if "S3OriginConfig" in o) == 1
        assert sum(1 for o in origins if "CustomOriginConfig" in o) == 1

    def test_web_acl_attached_by_reference(self, site_template):
        site_template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": Match.object_like({
                "WebACLId": Match.object_like({"Fn::ImportValue": Match.any_value()}),
            }),
        })


class TestPublishing:
    """Static assets are published and every edge cache path is invalidated."""

    def test_bucket_deployment_invalidates_everything(self, site_template):
        site_template.has_resource_properties("Custom::CDKBucketDeployment", {
            "DistributionPaths": ["/*"],
            "DistributionId": Match.any_value(),
            "DestinationBucketName": Match.any_value(),
        })

    def test_domain_name_output(self, site_template):
        outputs = site_template.find_outputs("DistributionDomainName")
        assert len(outputs) == 1
        (output,) = outputs.values()
        assert "DomainName" in str(output["Value"])


class TestAlternativeStore:
    """Public, retained bucket served over HTTPS only."""

    @pytest.fixture(scope="class")
    def template(self):
        plan = build_plan(DeploymentSettings())
        plan = dataclasses.replace(
            plan,
            object_store=ObjectStore(private=False, destroy_on_teardown=False),
            behaviors=BehaviorSet((
                DistributionBehavior("*", OriginKind.OBJECT_STORE, protocol=ProtocolPolicy.HTTPS_ONLY),
                DistributionBehavior("/api/*", OriginKind.API_ENDPOINT,
                                     protocol=ProtocolPolicy.HTTPS_ONLY, cacheable=False),
            )),
        )
        return Template.from_stack(compose(cdk.App(), plan).frontend)

    def test_bucket_retained(self, template):
        template.has_resource("AWS::S3::Bucket", {
            "DeletionPolicy": "Retain",
            "UpdateReplacePolicy": "Retain",
        })
        template.resource_count_is("Custom::S3AutoDeleteObjects", 0)

    def test_only_acls_blocked(self, template):
        (bucket,) = template.find_resources("AWS::S3::Bucket").values()
        block = bucket["Properties"]["PublicAccessBlockConfiguration"]
        assert block["BlockPublicAcls"] is True
        assert block["IgnorePublicAcls"] is True
        assert block.get("BlockPublicPolicy") is not True
        assert block.get("RestrictPublicBuckets") is not True

    def test_https_only_behaviours(self, template):
        config = _distribution_config(template)
        assert config["DefaultCacheBehavior"]["ViewerProtocolPolicy"] == "https-only"
        assert [b["ViewerProtocolPolicy"] for b in config["CacheBehaviors"]] == ["https-only"]
