# AGPL-3.0 License

"""
Compiles a CrowApiProps into provisioned resources.

Creates the up-front pieces (API key, shared layer, authorizer) and then
runs the breadth-first graph builder over the source directory.
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from crow_api.log import get_logger
from crow_api.props import CrowApiProps
from crow_api.provisioning.base_provisioner import Provisioner
from crow_api.tree.config_merger import ConfigMerger, FunctionDefaults
from crow_api.tree.directory_scanner import DirectoryScanner
from crow_api.tree.graph_builder import BuildResult, ConfigurationSources, ResourceGraphBuilder, VERBS

AUTHORIZER_FUNCTION_ID = 'authorizer-lambda'


@dataclass
class CompiledApi:
    """
    Outputs of one compilation.

    Attributes:
        build: Graph builder result (root handle, registries, path graph)
        shared_layer: Shared code layer, None if there is no shared directory
        authorizer_function: Authorizer function, None unless enabled
        authorizer: Token authorizer wrapping authorizer_function
        api_key: API key handle, None unless enabled
    """
    build: BuildResult
    shared_layer: Optional[Any] = None
    authorizer_function: Optional[Any] = None
    authorizer: Optional[Any] = None
    api_key: Optional[Any] = None


class ApiCompiler:
    """
    Drives a Provisioner from a fully populated CrowApiProps.
    """

    def __init__(
        self,
        provisioner: Provisioner,
        props: CrowApiProps,
        scanner: Optional[DirectoryScanner] = None
    ):
        self.provisioner = provisioner
        self.props = props
        self.scanner = scanner or DirectoryScanner(
            ignore_patterns=props.ignore_directories,
            config_filenames=props.declared_config_filenames,
        )
        self.defaults = FunctionDefaults(
            runtime=props.runtime,
            handler=props.handler,
            log_retention=props.log_retention,
        )
        self.logger = get_logger()

    def compile(self) -> CompiledApi:
        props = self.props

        api_key = None
        if props.create_api_key:
            api_key = self.provisioner.create_api_key(
                burst_limit=props.usage_plan_burst_limit,
                rate_limit=props.usage_plan_rate_limit,
            )

        shared_layer = self._create_shared_layer()

        authorizer_function = None
        authorizer = None
        if props.use_authorizer_lambda:
            authorizer_function, authorizer = self._create_authorizer(shared_layer)

        sources = ConfigurationSources(
            defaults=self.defaults,
            shared_layer=shared_layer,
            authorizer=authorizer,
            lambda_configurations=props.lambda_configurations,
            method_configurations=props.method_configurations,
            integration_options=props.lambda_integration_options,
            models=props.models,
            request_validators=props.request_validators,
            database_tables=props.database_tables,
        )
        build = ResourceGraphBuilder(self.provisioner, self.scanner).build(
            props.source_directory,
            sources,
            verbs=VERBS,
            special_directories=props.special_directories,
        )

        return CompiledApi(
            build=build,
            shared_layer=shared_layer,
            authorizer_function=authorizer_function,
            authorizer=authorizer,
            api_key=api_key,
        )

    def _create_shared_layer(self) -> Optional[Any]:
        shared_path = os.path.join(self.props.source_directory, self.props.shared_directory)
        if not os.path.isdir(shared_path):
            self.logger.debug(f"No shared directory at {shared_path}, skipping shared layer")
            return None

        self.logger.info(f"Creating shared layer from {shared_path}")
        return self.provisioner.create_layer(shared_path)

    def _create_authorizer(self, shared_layer: Optional[Any]):
        authorizer_path = os.path.join(self.props.source_directory, self.props.authorizer_directory)

        merger = ConfigMerger(self.defaults, shared_layer=shared_layer)
        function_props = merger.merge_function_props(
            authorizer_path,
            self.props.authorizer_function_configuration,
        )
        authorizer_function = self.provisioner.create_function(AUTHORIZER_FUNCTION_ID, function_props)

        authorizer_configuration = {
            "results_cache_ttl": self.props.authorizer_results_cache_ttl,
            **self.props.token_authorizer_configuration,
        }
        authorizer = self.provisioner.create_authorizer(authorizer_function, authorizer_configuration)

        self.logger.info(f"Created authorizer from {authorizer_path}")
        return authorizer_function, authorizer
