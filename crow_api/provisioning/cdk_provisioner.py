# AGPL-3.0 License

"""
Provisioner backed by aws-cdk-lib (API Gateway REST API + Lambda).
"""

from typing import Any, Dict, Optional

from aws_cdk import (
    Duration,
    RemovalPolicy,
    aws_apigateway as apigateway,
    aws_lambda as lambda_,
    aws_logs as logs,
)
from constructs import Construct

from crow_api.errors import CrowApiError
from crow_api.log import get_logger
from crow_api.props import CrowApiProps
from crow_api.provisioning.base_provisioner import Provisioner


# The REST API needs a handler even though no proxy method uses it
DEFAULT_LAMBDA_CODE = """
def handler(event, context):
    return {"statusCode": 201}
"""


def resolve_member(container: Any, value: Any, kind: str) -> Any:
    """
    Turn a member name like "PYTHON_3_12" into container.PYTHON_3_12.

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    try:
        return getattr(container, value.upper())
    except AttributeError:
        raise CrowApiError(f"Unknown {kind} '{value}'") from None


def seconds(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Duration.seconds(value)
    return value


class CdkProvisioner(Provisioner):
    """
    Creates CDK constructs inside scope.

    Creating the provisioner creates the REST API itself: a placeholder
    default function, an access log group and a LambdaRestApi without
    proxy, with api_gateway_configuration overlaid on those defaults.
    """

    def __init__(self, scope: Construct, props: CrowApiProps, settings: Optional[Any] = None):
        self.scope = scope
        self.props = props
        self.logger = get_logger()
        self.runtime = resolve_member(lambda_.Runtime, props.runtime, "runtime")
        self.log_retention = resolve_member(logs.RetentionDays, props.log_retention, "log retention")

        access_log_retention = "ONE_WEEK"
        logging_level = "ERROR"
        if settings is not None:
            access_log_retention = settings.get("gateway.access_log_retention", access_log_retention)
            logging_level = settings.get("gateway.logging_level", logging_level)

        self.default_function = lambda_.Function(
            scope,
            'default-crow-lambda',
            runtime=self.runtime,
            code=lambda_.InlineCode(DEFAULT_LAMBDA_CODE),
            handler='index.handler',
            log_retention=self.log_retention,
        )

        self.access_log_group = logs.LogGroup(
            scope,
            'api-access-logs',
            retention=resolve_member(logs.RetentionDays, access_log_retention, "log retention"),
        )

        gateway_props = {
            "handler": self.default_function,
            "proxy": False,
            "deploy": True,
            "deploy_options": apigateway.StageOptions(
                logging_level=resolve_member(apigateway.MethodLoggingLevel, logging_level, "logging level"),
                access_log_destination=apigateway.LogGroupLogDestination(self.access_log_group),
            ),
            "api_key_source_type": apigateway.ApiKeySourceType.HEADER if props.create_api_key else None,
            **props.api_gateway_configuration,
        }
        self.gateway = apigateway.LambdaRestApi(scope, props.api_gateway_name, **gateway_props)

    @property
    def root_resource(self) -> apigateway.IResource:
        return self.gateway.root

    def create_resource(self, parent: apigateway.IResource, path_segment: str) -> apigateway.Resource:
        return parent.resource_for_path(path_segment)

    def create_function(self, construct_id: str, props: Dict[str, Any]) -> lambda_.Function:
        return lambda_.Function(self.scope, construct_id, **self._function_props(props))

    def create_method(
        self,
        resource: apigateway.IResource,
        http_method: str,
        function: lambda_.IFunction,
        method_options: Dict[str, Any],
        integration_options: Optional[Dict[str, Any]] = None
    ) -> apigateway.Method:
        options = dict(method_options)
        authorization_type = options.get("authorization_type")
        if isinstance(authorization_type, str):
            options["authorization_type"] = self._authorization_type(authorization_type)

        integration = apigateway.LambdaIntegration(function, **(integration_options or {}))
        return resource.add_method(http_method, integration, **options)

    def create_layer(self, code_path: str) -> lambda_.LayerVersion:
        return lambda_.LayerVersion(
            self.scope,
            'shared-layer',
            code=lambda_.Code.from_asset(code_path),
            compatible_runtimes=[self.runtime],
            removal_policy=RemovalPolicy.DESTROY,
        )

    def create_authorizer(self, function: lambda_.IFunction, configuration: Dict[str, Any]) -> apigateway.TokenAuthorizer:
        configuration = dict(configuration)
        if "results_cache_ttl" in configuration:
            configuration["results_cache_ttl"] = seconds(configuration["results_cache_ttl"])
        return apigateway.TokenAuthorizer(
            self.scope,
            'token-authorizer',
            handler=function,
            **configuration,
        )

    def create_api_key(self, burst_limit: int, rate_limit: int) -> apigateway.IApiKey:
        api_key = self.gateway.add_api_key('api-key')
        usage_plan = apigateway.UsagePlan(
            self.scope,
            'usage-plan',
            throttle=apigateway.ThrottleSettings(
                burst_limit=burst_limit,
                rate_limit=rate_limit,
            ),
            api_stages=[
                apigateway.UsagePlanPerApiStage(
                    api=self.gateway,
                    stage=self.gateway.deployment_stage,
                ),
            ],
        )
        usage_plan.add_api_key(api_key)
        return api_key

    def create_model(self, name: str, definition: Dict[str, Any]) -> apigateway.Model:
        return self.gateway.add_model(name, **definition)

    def create_request_validator(self, name: str, definition: Dict[str, Any]) -> apigateway.RequestValidator:
        return self.gateway.add_request_validator(name, **definition)

    def grant_table_access(self, function: lambda_.IFunction, table: Any) -> None:
        table.grant_full_access(function)

    def table_name(self, table: Any) -> str:
        return table.table_name

    def _function_props(self, props: Dict[str, Any]) -> Dict[str, Any]:
        """Convert plain values (paths, names, seconds) into CDK types."""
        props = dict(props)
        if isinstance(props.get("code"), str):
            props["code"] = lambda_.Code.from_asset(props["code"])
        if "runtime" in props:
            props["runtime"] = resolve_member(lambda_.Runtime, props["runtime"], "runtime")
        if "log_retention" in props:
            props["log_retention"] = resolve_member(logs.RetentionDays, props["log_retention"], "log retention")
        if "tracing" in props:
            props["tracing"] = resolve_member(lambda_.Tracing, props["tracing"], "tracing mode")
        if "timeout" in props:
            props["timeout"] = seconds(props["timeout"])
        return props

    def _authorization_type(self, value: str) -> apigateway.AuthorizationType:
        for member in apigateway.AuthorizationType:
            if value.upper() in (member.name, member.value):
                return member
        raise CrowApiError(f"Unknown authorization type '{value}'")
