# AGPL-3.0 License

"""
Configuration merging for verb directories.

Combines the global function defaults, the shared layer, a verb directory's
declared configuration file and the caller's per-path overrides into one
effective configuration.

Precedence, highest first:
    per-path method configuration
    per-path function configuration (lambda_configurations)
    declared configuration file (crow.json / crow.toml)
    shared layer injection
    global defaults

The layer list is the exception: the shared layer is always first and
cannot be overridden away. Environment variables are overlaid key by key,
so manually set variables win over injected table variables.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from crow_api.log import get_logger


USE_AUTHORIZER_FIELD = 'use_authorizer_lambda'


@dataclass(frozen=True)
class FunctionDefaults:
    """
    Global defaults for every function created from a verb directory.

    Values are provider objects (e.g. an aws_lambda.Runtime), passed through
    untouched.
    """
    runtime: Any
    handler: str
    log_retention: Any


@dataclass(frozen=True)
class EffectiveConfiguration:
    """
    Fully merged configuration for one verb directory.

    Attributes:
        function_props: Keyword arguments for function creation
        method_options: Method options; model/validator values are still names
        integration_options: Options for the function integration
        table_keys: Database table keys the function declared it uses
        use_authorizer: Whether the method opted in to the authorizer
    """
    function_props: Dict[str, Any]
    method_options: Dict[str, Any] = field(default_factory=dict)
    integration_options: Dict[str, Any] = field(default_factory=dict)
    table_keys: Tuple[str, ...] = ()
    use_authorizer: bool = False


class ConfigMerger:
    """
    Merges the configuration layers of a verb directory.

    Function-level and method-level fields are merged separately. Named
    references in method options (request models, request validator) are
    left as names; the graph builder resolves them against its registries.
    """

    # Method option fields recognised in a method configuration
    METHOD_FIELDS: ClassVar[List[str]] = [
        "api_key_required",
        "authorization_type",
        "authorizer",
        "method_responses",
        "operation_name",
        "request_models",
        "request_parameters",
        "request_validator",
        "request_validator_options",
    ]

    def __init__(
        self,
        defaults: FunctionDefaults,
        shared_layer: Optional[Any] = None,
        table_names: Optional[Dict[str, str]] = None
    ):
        """
        Args:
            defaults: Global function defaults
            shared_layer: Shared code layer handle, if one was created
            table_names: Database table key -> deployed table name
        """
        self.defaults = defaults
        self.shared_layer = shared_layer
        self.table_names = dict(table_names or {})
        self.logger = get_logger()

    def merge(
        self,
        code_path: str,
        path_override: Optional[Dict[str, Any]] = None,
        declared: Optional[Dict[str, Any]] = None,
        method_override: Optional[Dict[str, Any]] = None,
        integration_override: Optional[Dict[str, Any]] = None
    ) -> EffectiveConfiguration:
        """
        Produce the effective configuration for one verb directory.

        Args:
            code_path: Directory holding the function code
            path_override: Caller's function configuration for this API path
            declared: Normalized declared configuration file content
            method_override: Caller's method configuration for this API path
            integration_override: Caller's integration options for this API path

        Returns:
            EffectiveConfiguration
        """
        path_override = path_override or {}
        declared = declared or {}
        method_override = method_override or {}

        database_tables = declared.get("database_tables", {})

        return EffectiveConfiguration(
            function_props=self.merge_function_props(
                code_path,
                path_override,
                declared.get("function_configuration", {}),
                self._table_environment(database_tables, code_path),
            ),
            method_options=self.merge_method_options(method_override, code_path),
            integration_options=dict(integration_override or {}),
            table_keys=tuple(database_tables),
            use_authorizer=self._use_authorizer(method_override, path_override, declared),
        )

    def merge_function_props(
        self,
        code_path: str,
        path_override: Dict[str, Any],
        declared_override: Optional[Dict[str, Any]] = None,
        injected_environment: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Merge function-level fields.

        Scalars: path override > declared override > defaults.
        Environment: path override > declared override > injected, per key.
        Layers: [shared layer, *user layers].
        """
        declared_override = declared_override or {}

        props: Dict[str, Any] = {
            "runtime": self.defaults.runtime,
            "code": code_path,
            "handler": self.defaults.handler,
            "log_retention": self.defaults.log_retention,
        }

        for overlay in (declared_override, path_override):
            for key, value in overlay.items():
                if key in ("environment", "layers", USE_AUTHORIZER_FIELD):
                    continue
                props[key] = value

        environment = {
            **(injected_environment or {}),
            **(declared_override.get("environment") or {}),
            **(path_override.get("environment") or {}),
        }
        if environment:
            props["environment"] = environment

        user_layers = path_override.get("layers")
        if user_layers is None:
            user_layers = declared_override.get("layers")
        layers = self.merge_layers(user_layers)
        if layers:
            props["layers"] = layers

        return props

    def merge_layers(self, user_layers: Optional[List[Any]] = None) -> List[Any]:
        """Shared layer first, then the user's layers in their order."""
        user_layers = list(user_layers or [])
        if self.shared_layer is None:
            return user_layers
        return [self.shared_layer, *user_layers]

    def merge_method_options(
        self,
        method_override: Dict[str, Any],
        location: str = ""
    ) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        for key, value in method_override.items():
            if key == USE_AUTHORIZER_FIELD:
                continue
            if key not in self.METHOD_FIELDS:
                self.logger.warning(
                    f"Ignoring unknown method configuration field: {key}",
                    extra={"field": key, "path": location}
                )
                continue
            options[key] = value
        return options

    def _table_environment(self, database_tables: Dict[str, str], code_path: str) -> Dict[str, str]:
        environment = {}
        for table_key, variable_name in database_tables.items():
            table_name = self.table_names.get(table_key)
            if table_name is None:
                self.logger.warning(
                    f"{code_path} uses unknown database table '{table_key}'",
                    extra={"table": table_key, "path": code_path}
                )
                continue
            environment[variable_name] = table_name
        return environment

    def _use_authorizer(self, *layers: Dict[str, Any]) -> bool:
        # First layer that sets the flag decides
        for layer in layers:
            if USE_AUTHORIZER_FIELD in layer:
                return bool(layer[USE_AUTHORIZER_FIELD])
        return False
