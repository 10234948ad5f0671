"""Pytest fixtures for the CDK app tests."""

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from stacks.composition import deploy

# Same region for every stack keeps cross-stack references plain exports
CONTEXT = {
    "region": "us-east-1",
    "edge_region": "us-east-1",
}


@pytest.fixture
def context():
    return dict(CONTEXT)


@pytest.fixture(scope="session")
def deployment():
    """Synthesizing is slow, so one app is shared by the stack tests."""
    app = cdk.App(context=dict(CONTEXT))
    return deploy(app)


@pytest.fixture(scope="session")
def waf_template(deployment):
    return Template.from_stack(deployment.waf)


@pytest.fixture(scope="session")
def api_template(deployment):
    return Template.from_stack(deployment.backend)


@pytest.fixture(scope="session")
def site_template(deployment):
    return Template.from_stack(deployment.frontend)
