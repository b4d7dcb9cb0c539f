# AGPL-3.0 License

"""
Construct options with every default applied.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from crow_api.config_loader import get_settings


@dataclass
class CrowApiProps:
    """
    Fully populated options for one CrowApi.

    Build with from_settings() so defaults from settings/configuration.toml
    are applied once, before any resource is created. runtime and
    log_retention may be provider objects or the names of their members
    (e.g. "PYTHON_3_12", "ONE_WEEK").
    """
    source_directory: str = "src"
    shared_directory: str = "shared"
    use_authorizer_lambda: bool = False
    authorizer_directory: str = "authorizer"
    authorizer_function_configuration: Dict[str, Any] = field(default_factory=dict)
    token_authorizer_configuration: Dict[str, Any] = field(default_factory=dict)
    authorizer_results_cache_ttl: int = 3600
    create_api_key: bool = False
    usage_plan_burst_limit: int = 5000
    usage_plan_rate_limit: int = 10000
    runtime: Any = "PYTHON_3_12"
    handler: str = "index.handler"
    log_retention: Any = "ONE_WEEK"
    api_gateway_configuration: Dict[str, Any] = field(default_factory=dict)
    api_gateway_name: str = "crow-api"
    lambda_configurations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    lambda_integration_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    method_configurations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    models: List[Dict[str, Any]] = field(default_factory=list)
    request_validators: List[Dict[str, Any]] = field(default_factory=list)
    database_tables: Dict[str, Any] = field(default_factory=dict)
    ignore_directories: List[str] = field(default_factory=list)
    declared_config_filenames: List[str] = field(default_factory=lambda: ["crow.json", "crow.toml"])

    @property
    def special_directories(self) -> List[str]:
        return [self.shared_directory, self.authorizer_directory]

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None, **overrides) -> "CrowApiProps":
        """
        Create props from settings, then apply caller overrides.

        Overrides set to None are treated as not given.

        Raises:
            TypeError: If an override is not a known option
        """
        settings = settings or get_settings()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown CrowApi option(s): {', '.join(unknown)}")

        values: Dict[str, Any] = {
            "source_directory": settings.get("crow_api.source_directory", "src"),
            "shared_directory": settings.get("crow_api.shared_directory", "shared"),
            "authorizer_directory": settings.get("crow_api.authorizer_directory", "authorizer"),
            "api_gateway_name": settings.get("crow_api.api_gateway_name", "crow-api"),
            "use_authorizer_lambda": settings.get("crow_api.use_authorizer_lambda", False),
            "create_api_key": settings.get("crow_api.create_api_key", False),
            "ignore_directories": list(settings.get("crow_api.ignore_directories", [])),
            "runtime": settings.get("lambda.runtime", "PYTHON_3_12"),
            "handler": settings.get("lambda.handler", "index.handler"),
            "log_retention": settings.get("lambda.log_retention", "ONE_WEEK"),
            "authorizer_results_cache_ttl": settings.get("authorizer.results_cache_ttl_seconds", 3600),
            "usage_plan_burst_limit": settings.get("usage_plan.burst_limit", 5000),
            "usage_plan_rate_limit": settings.get("usage_plan.rate_limit", 10000),
            "declared_config_filenames": list(
                settings.get("declared_config.filenames", ["crow.json", "crow.toml"])
            ),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        return cls(**values)
