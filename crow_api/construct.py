# AGPL-3.0 License

"""
The CrowApi construct: a REST API compiled from a directory tree.
"""

from typing import Any, Dict, Optional

from aws_cdk import aws_apigateway as apigateway, aws_lambda as lambda_
from constructs import Construct

from crow_api.compiler import ApiCompiler
from crow_api.config_loader import get_settings
from crow_api.props import CrowApiProps
from crow_api.provisioning.cdk_provisioner import CdkProvisioner


class CrowApi(Construct):
    """
    Builds an API Gateway REST API from the folders under source_directory.

    Every folder becomes a path segment, and get/post/put/delete folders
    become methods backed by a Lambda function built from that folder.

    Keyword options are the CrowApiProps fields, e.g.::

        CrowApi(self, 'api',
            source_directory='src',
            use_authorizer_lambda=True,
            lambda_configurations={'/v1/book/get': {'memory_size': 1024}},
            method_configurations={'/v1/book/get': {'use_authorizer_lambda': True}},
        )

    Attributes:
        gateway: The LambdaRestApi
        authorizer_lambda: Authorizer function (None unless enabled)
        lambda_layer: Shared code layer (None without a shared directory)
        lambda_functions: API path of each verb folder -> its function
        models: Model name -> Model
        request_validators: Validator name -> RequestValidator
    """

    def __init__(self, scope: Construct, id: str, **props: Any):
        super().__init__(scope, id)

        settings = get_settings()
        self.props = CrowApiProps.from_settings(settings, **props)

        provisioner = CdkProvisioner(self, self.props, settings)
        compiled = ApiCompiler(provisioner, self.props).compile()

        self.gateway: apigateway.LambdaRestApi = provisioner.gateway
        self.authorizer_lambda: Optional[lambda_.Function] = compiled.authorizer_function
        self.authorizer: Optional[apigateway.TokenAuthorizer] = compiled.authorizer
        self.lambda_layer: Optional[lambda_.LayerVersion] = compiled.shared_layer
        self.lambda_functions: Dict[str, lambda_.Function] = compiled.build.functions.to_dict()
        self.models = compiled.build.models
        self.request_validators = compiled.build.validators
