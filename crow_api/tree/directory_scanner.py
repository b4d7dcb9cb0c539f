# AGPL-3.0 License

"""
Directory scanning for the source tree.

Lists the child directories of a traversal node and loads the optional
declared configuration file that can sit inside a verb directory.
"""

import json
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import pathspec

from crow_api.log import get_logger


# Declared configuration file names (in order of precedence)
DECLARED_CONFIG_FILENAMES = [
    'crow.json',
    'crow.toml',
]

# Keys of a declared configuration file
FUNCTION_CONFIGURATION_KEY = 'functionConfiguration'
LEGACY_FUNCTION_CONFIGURATION_KEY = 'lambdaConfiguration'
DATABASE_TABLES_KEY = 'databaseTables'
USE_AUTHORIZER_KEY = 'useAuthorizerLambda'

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def to_snake_case(key: str) -> str:
    """memorySize -> memory_size; snake_case keys pass through unchanged."""
    return _CAMEL_BOUNDARY.sub('_', key).lower()


class DirectoryScanner:
    """
    Reads the source tree for the graph builder.

    Read failures are never fatal here: a directory that cannot be listed
    has no children, and a declared configuration file that cannot be
    parsed is treated as empty.
    """

    def __init__(
        self,
        ignore_patterns: Optional[List[str]] = None,
        config_filenames: Optional[List[str]] = None
    ):
        """
        Args:
            ignore_patterns: gitwildmatch patterns for directory names to skip
            config_filenames: Declared configuration file names, first match wins
        """
        self.ignore_patterns = list(ignore_patterns or [])
        self.config_filenames = list(config_filenames or DECLARED_CONFIG_FILENAMES)
        self._ignore_spec = (
            pathspec.PathSpec.from_lines('gitwildmatch', self.ignore_patterns)
            if self.ignore_patterns else None
        )
        self.logger = get_logger()

    def list_child_directories(self, path: str) -> List[str]:
        """
        Return the names of the immediate child directories of path.

        Order is the filesystem's enumeration order. Files are skipped.

        Args:
            path: Directory to list

        Returns:
            Child directory names, or an empty list if path cannot be read
        """
        try:
            with os.scandir(path) as entries:
                children = [entry.name for entry in entries if entry.is_dir()]
        except OSError as e:
            # An empty or missing source root is left for the provider's
            # own validation (a REST API without methods)
            self.logger.debug(f"Could not list {path}, treating it as empty: {e}")
            return []

        if self._ignore_spec:
            children = [
                child for child in children
                if not self._ignore_spec.match_file(f"{child}/")
            ]

        return children

    def find_declared_config_file(self, directory: str) -> Optional[Path]:
        for config_name in self.config_filenames:
            config_path = Path(directory) / config_name
            if config_path.is_file():
                return config_path
        return None

    def load_declared_configuration(self, directory: str) -> Dict[str, Any]:
        """
        Load the declared configuration file of a verb directory.

        Args:
            directory: Verb directory to look in

        Returns:
            Normalized configuration with the keys "function_configuration",
            "database_tables" and (if present) "use_authorizer_lambda".
            Empty dict when there is no file, it cannot be parsed, or a
            known key holds a value of the wrong type.
        """
        config_path = self.find_declared_config_file(directory)
        if config_path is None:
            return {}

        try:
            raw = self._read_config_file(config_path)
        except (OSError, ValueError):
            # A bad config file should not break synthesis of the whole API
            self.logger.exception(
                f"Failed to load declared configuration {config_path}, ignoring it",
                extra={"config_path": str(config_path)}
            )
            return {}

        if not isinstance(raw, dict):
            self.logger.warning(
                f"Declared configuration {config_path} is not an object, ignoring it",
                extra={"config_path": str(config_path)}
            )
            return {}

        return self._normalize(raw, config_path)

    def _read_config_file(self, config_path: Path) -> Any:
        if config_path.suffix == '.toml':
            with open(config_path, 'rb') as f:
                return tomllib.load(f)
        with open(config_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _normalize(self, raw: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
        function_configuration = raw.get(FUNCTION_CONFIGURATION_KEY)
        if function_configuration is None:
            function_configuration = raw.get(LEGACY_FUNCTION_CONFIGURATION_KEY)
        function_configuration = {} if function_configuration is None else function_configuration
        database_tables = raw.get(DATABASE_TABLES_KEY)
        database_tables = {} if database_tables is None else database_tables

        problem = None
        if not isinstance(function_configuration, dict):
            problem = f"{FUNCTION_CONFIGURATION_KEY} is not an object"
        elif not isinstance(function_configuration.get("environment", {}), dict):
            problem = "environment is not an object"
        elif not isinstance(database_tables, dict):
            problem = f"{DATABASE_TABLES_KEY} is not an object"
        elif USE_AUTHORIZER_KEY in raw and not isinstance(raw[USE_AUTHORIZER_KEY], bool):
            problem = f"{USE_AUTHORIZER_KEY} is not a boolean"

        if problem:
            self.logger.warning(
                f"Declared configuration {config_path} is invalid ({problem}), ignoring it",
                extra={"config_path": str(config_path)}
            )
            return {}

        normalized: Dict[str, Any] = {
            "function_configuration": {
                to_snake_case(key): value
                for key, value in function_configuration.items()
            },
            "database_tables": dict(database_tables),
        }
        if USE_AUTHORIZER_KEY in raw:
            normalized["use_authorizer_lambda"] = raw[USE_AUTHORIZER_KEY]

        return normalized
