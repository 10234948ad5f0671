#!/usr/bin/env python3
import logging

import aws_cdk as cdk

from stacks.composition import deploy

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

app = cdk.App()

# Context keys: account, region, edge_region, rate_limit, cors_allow_origins
deploy(app)

app.synth()
