# AGPL-3.0 License

"""
Breadth-first compilation of a source tree into gateway resources and methods.
"""

import os
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterable, List, Optional, Set

from crow_api.errors import CrowApiError
from crow_api.log import get_logger
from crow_api.provisioning.base_provisioner import Provisioner
from crow_api.tree.config_merger import ConfigMerger, EffectiveConfiguration, FunctionDefaults
from crow_api.tree.directory_scanner import DirectoryScanner
from crow_api.tree.registry import Registry, function_registry, model_registry, validator_registry


VERBS = ('get', 'post', 'put', 'delete')
ROOT_API_PATH = '/'
AUTHORIZATION_TYPE_CUSTOM = 'CUSTOM'


@dataclass
class PathGraphNode:
    """
    One API path segment.

    Attributes:
        resource: Provisioned gateway resource for this path
        directory_path: Directory the path was derived from
        child_path_segments: Child segment names, in discovery order
        verbs_bound: Verbs with a method on this resource
    """
    resource: Any
    directory_path: str
    child_path_segments: List[str] = field(default_factory=list)
    verbs_bound: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class TraversalQueueEntry:
    directory_path: str
    api_path: str


@dataclass
class ConfigurationSources:
    """
    Everything the caller supplies to one build.

    Per-path maps are keyed by the API path of the verb directory,
    e.g. "/v1/authors/get".
    """
    defaults: FunctionDefaults
    shared_layer: Optional[Any] = None
    authorizer: Optional[Any] = None
    lambda_configurations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    method_configurations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    integration_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    models: List[Dict[str, Any]] = field(default_factory=list)
    request_validators: List[Dict[str, Any]] = field(default_factory=list)
    database_tables: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BuildResult:
    root_resource: Any
    functions: Registry
    models: Registry
    validators: Registry
    graph: Dict[str, PathGraphNode]


def child_api_path(api_path: str, child: str) -> str:
    """Join a child segment onto an API path without doubling the root slash."""
    if api_path == ROOT_API_PATH:
        return f"/{child}"
    return f"{api_path}/{child}"


class ResourceGraphBuilder:
    """
    Walks a source tree breadth first and drives the provisioner.

    For every directory:
    1. A verb child (get/post/put/delete) becomes a function plus a method
       on the directory's resource; it is not traversed further
    2. A special child (shared code, authorizer) is skipped entirely
    3. Any other child becomes a gateway resource and is queued

    Creation order follows the directory listing at each level and
    breadth-first level order overall.
    """

    def __init__(
        self,
        provisioner: Provisioner,
        scanner: Optional[DirectoryScanner] = None
    ):
        """
        Args:
            provisioner: Creates the resources
            scanner: Reads the source tree (default: no ignore patterns)
        """
        self.provisioner = provisioner
        self.scanner = scanner or DirectoryScanner()
        self.logger = get_logger()

    def build(
        self,
        root_directory: str,
        sources: ConfigurationSources,
        verbs: Iterable[str] = VERBS,
        special_directories: Iterable[str] = ()
    ) -> BuildResult:
        """
        Compile root_directory into gateway resources, functions and methods.

        Args:
            root_directory: Source tree root, mapped to API path "/"
            sources: Defaults, overrides and up-front handles for this build
            verbs: Directory names that bind HTTP methods
            special_directories: Directory names that never become API paths

        Returns:
            BuildResult with the root handle, registries and path graph

        Raises:
            UnknownReferenceError: A method references an undeclared model/validator
            Exception: Anything the provisioner raises is propagated
        """
        verbs = set(verbs)
        special_directories = set(special_directories)
        root_directory = str(root_directory)

        merger = ConfigMerger(
            sources.defaults,
            shared_layer=sources.shared_layer,
            table_names={
                key: self.provisioner.table_name(table)
                for key, table in sources.database_tables.items()
            },
        )
        models = self._register_models(sources.models)
        validators = self._register_validators(sources.request_validators)
        functions = function_registry()

        graph: Dict[str, PathGraphNode] = {
            ROOT_API_PATH: PathGraphNode(
                resource=self.provisioner.root_resource,
                directory_path=root_directory,
            )
        }
        queue: Deque[TraversalQueueEntry] = deque([
            TraversalQueueEntry(root_directory, ROOT_API_PATH)
        ])

        while queue:
            entry = queue.popleft()
            node = graph[entry.api_path]
            children = self.scanner.list_child_directories(entry.directory_path)
            self.logger.debug(f"{entry.api_path} children: {children}")

            # No visited set: a directory tree cannot reach a node twice
            for child in children:
                new_directory_path = os.path.join(entry.directory_path, child)
                new_api_path = child_api_path(entry.api_path, child)

                if child in verbs:
                    function = self._bind_verb(
                        node, child, new_directory_path, new_api_path,
                        sources, merger, models, validators,
                    )
                    functions.register(new_api_path, function)

                elif child in special_directories:
                    # Reserved names never become part of the API surface
                    continue

                else:
                    resource = self.provisioner.create_resource(node.resource, child)
                    node.child_path_segments.append(child)
                    graph[new_api_path] = PathGraphNode(
                        resource=resource,
                        directory_path=new_directory_path,
                    )
                    queue.append(TraversalQueueEntry(new_directory_path, new_api_path))

        self.logger.info(
            f"Compiled {root_directory} into {len(graph) - 1} resources and {len(functions)} methods",
            extra={"resource_count": len(graph) - 1, "method_count": len(functions)}
        )

        return BuildResult(
            root_resource=graph[ROOT_API_PATH].resource,
            functions=functions,
            models=models,
            validators=validators,
            graph=graph,
        )

    def _bind_verb(
        self,
        node: PathGraphNode,
        verb: str,
        directory_path: str,
        api_path: str,
        sources: ConfigurationSources,
        merger: ConfigMerger,
        models: Registry,
        validators: Registry
    ) -> Any:
        configuration = merger.merge(
            directory_path,
            path_override=sources.lambda_configurations.get(api_path),
            declared=self.scanner.load_declared_configuration(directory_path),
            method_override=sources.method_configurations.get(api_path),
            integration_override=sources.integration_options.get(api_path),
        )

        function = self.provisioner.create_function(directory_path, configuration.function_props)
        self._grant_tables(function, configuration, sources)

        method_options = self._resolve_method_options(
            configuration, api_path, sources.authorizer, models, validators
        )
        self.provisioner.create_method(
            node.resource,
            verb.upper(),
            function,
            method_options,
            configuration.integration_options,
        )
        node.verbs_bound.add(verb)

        return function

    def _resolve_method_options(
        self,
        configuration: EffectiveConfiguration,
        api_path: str,
        authorizer: Optional[Any],
        models: Registry,
        validators: Registry
    ) -> Dict[str, Any]:
        options = dict(configuration.method_options)

        # Opting in without an authorizer is a no-op
        if configuration.use_authorizer and authorizer is not None:
            options["authorization_type"] = AUTHORIZATION_TYPE_CUSTOM
            options["authorizer"] = authorizer

        request_models = options.get("request_models")
        if request_models:
            options["request_models"] = {
                content_type: models.resolve(model, api_path) if isinstance(model, str) else model
                for content_type, model in request_models.items()
            }

        request_validator = options.get("request_validator")
        if isinstance(request_validator, str):
            options["request_validator"] = validators.resolve(request_validator, api_path)

        return options

    def _grant_tables(
        self,
        function: Any,
        configuration: EffectiveConfiguration,
        sources: ConfigurationSources
    ) -> None:
        for table_key in configuration.table_keys:
            table = sources.database_tables.get(table_key)
            if table is not None:
                self.provisioner.grant_table_access(function, table)

    def _register_models(self, definitions: List[Dict[str, Any]]) -> Registry:
        models = model_registry()
        for definition in definitions:
            name = self._definition_name(definition, "model_name", "model")
            models.register(name, self.provisioner.create_model(name, definition))
        return models

    def _register_validators(self, definitions: List[Dict[str, Any]]) -> Registry:
        validators = validator_registry()
        for definition in definitions:
            name = self._definition_name(definition, "request_validator_name", "request validator")
            validators.register(name, self.provisioner.create_request_validator(name, definition))
        return validators

    def _definition_name(self, definition: Dict[str, Any], key: str, kind: str) -> str:
        name = definition.get(key)
        if not name:
            raise CrowApiError(f"Every {kind} needs a '{key}': {definition}")
        return name
