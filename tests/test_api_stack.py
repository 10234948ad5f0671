"""Tests for the Lambda + API Gateway stack."""

import json

import aws_cdk as cdk
from aws_cdk.assertions import Match, Template

from stacks.composition import deploy

HANDLER = Match.string_like_regexp(r"^sample_lambda_\d\.handler$")


def _method_targets(template, path_part, http_method):
    """Return the integration URIs of `http_method` on the resource named `path_part`."""
    resources = template.find_resources("AWS::ApiGateway::Resource", {
        "Properties": {"PathPart": path_part},
    })
    assert len(resources) == 1
    (resource_id,) = resources
    methods = template.find_resources("AWS::ApiGateway::Method", {
        "Properties": {"HttpMethod": http_method, "ResourceId": {"Ref": resource_id}},
    })
    return [json.dumps(m["Properties"]["Integration"]["Uri"]) for m in methods.values()]


class TestFunctions:
    """Both stub functions."""

    def test_two_python_functions(self, api_template):
        api_template.resource_properties_count_is("AWS::Lambda::Function", {
            "Handler": HANDLER,
            "Runtime": "python3.12",
        }, 2)

    def test_functions_get_log_level(self, api_template):
        api_template.has_resource_properties("AWS::Lambda::Function", {
            "Handler": "sample_lambda_1.handler",
            "Timeout": 10,
            "Environment": {"Variables": {"LOG_LEVEL": "INFO"}},
        })


class TestRestApi:
    """Routing front door."""

    def test_named_rest_api(self, api_template):
        api_template.resource_count_is("AWS::ApiGateway::RestApi", 1)
        api_template.has_resource_properties("AWS::ApiGateway::RestApi", {
            "Name": "Serverless API",
        })

    def test_resources_under_api(self, api_template):
        for part in ("api", "lambda-1", "lambda-2"):
            api_template.has_resource_properties("AWS::ApiGateway::Resource", {"PathPart": part})

    def test_only_declared_get_methods(self, api_template):
        api_template.resource_properties_count_is("AWS::ApiGateway::Method", {"HttpMethod": "GET"}, 2)
        api_template.resource_properties_count_is("AWS::ApiGateway::Method", {"HttpMethod": "POST"}, 0)

    def test_routes_reach_their_own_function(self, api_template):
        (lambda_1,) = _method_targets(api_template, "lambda-1", "GET")
        (lambda_2,) = _method_targets(api_template, "lambda-2", "GET")
        assert "ApiHandler1" in lambda_1 and "ApiHandler2" not in lambda_1
        assert "ApiHandler2" in lambda_2 and "ApiHandler1" not in lambda_2

    def test_proxy_integration(self, api_template):
        api_template.has_resource_properties("AWS::ApiGateway::Method", {
            "HttpMethod": "GET",
            "Integration": Match.object_like({"Type": "AWS_PROXY"}),
        })

    def test_preflight_allows_all_origins(self, api_template):
        api_template.has_resource_properties("AWS::ApiGateway::Method", {
            "HttpMethod": "OPTIONS",
            "Integration": Match.object_like({
                "Type": "MOCK",
                "IntegrationResponses": [Match.object_like({
                    "ResponseParameters": Match.object_like({
                        "method.response.header.Access-Control-Allow-Origin": "'*'",
                    }),
                })],
            }),
        })

    def test_preflight_origin_from_context(self, context):
        context["cors_allow_origins"] = "https://app.example.com"
        deployment = deploy(cdk.App(context=context))
        template = Template.from_stack(deployment.backend)
        template.has_resource_properties("AWS::ApiGateway::Method", {
            "HttpMethod": "OPTIONS",
            "Integration": Match.object_like({
                "IntegrationResponses": [Match.object_like({
                    "ResponseParameters": Match.object_like({
                        "method.response.header.Access-Control-Allow-Origin": "'https://app.example.com'",
                    }),
                })],
            }),
        })
