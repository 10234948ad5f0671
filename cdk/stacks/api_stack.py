from aws_cdk import (
    Stack,
    Duration,
    aws_apigateway as apigw,
    aws_lambda as _lambda,
    aws_logs as logs,
)
from constructs import Construct

from topology.routes import Endpoint, RouteTable


class ApiStack(Stack):
    def __init__(self, scope: Construct, construct_id: str,
                 endpoints: tuple[Endpoint, ...],
                 route_table: RouteTable,
                 cors_allow_origins: tuple[str, ...] = ("*",),
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Lambdas
        common_env = {
            "LOG_LEVEL": "INFO"
        }

        self.functions: dict[str, _lambda.Function] = {}
        for endpoint in endpoints:
            self.functions[endpoint.identifier] = _lambda.Function(
                self, endpoint.identifier,
                runtime=_lambda.Runtime(endpoint.runtime, _lambda.RuntimeFamily.PYTHON),
                handler=endpoint.handler,
                code=_lambda.Code.from_asset(endpoint.asset_dir),
                environment=common_env,
                timeout=Duration.seconds(10),
                log_retention=logs.RetentionDays.TWO_WEEKS)

        # API Gateway; the demo has no auth so preflight allows every method
        if tuple(cors_allow_origins) == ("*",):
            allow_origins = apigw.Cors.ALL_ORIGINS
        else:
            allow_origins = list(cors_allow_origins)

        self.api = apigw.RestApi(self, "Api",
                                 rest_api_name="Serverless API",
                                 description="API Gateway for serverless web app",
                                 default_cors_preflight_options=apigw.CorsOptions(
                                     allow_origins=allow_origins,
                                     allow_methods=apigw.Cors.ALL_METHODS,
                                 ))

        # One integration per function, shared by every route that targets it
        integrations = {
            identifier: apigw.LambdaIntegration(fn, proxy=True)
            for identifier, fn in self.functions.items()
        }

        # /api/lambda-1, /api/lambda-2
        for route in route_table.routes:
            resource = self.api.root.resource_for_path(route.resource_path)
            resource.add_method(route.method, integrations[route.endpoint])

        self.api_execute_url = f"{self.api.url}"
