"""
Shared fixtures: a temporary source tree and a provisioner that records
every creation call instead of touching a cloud provider.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from crow_api.provisioning.base_provisioner import Provisioner
from crow_api.tree.config_merger import FunctionDefaults


class RecordingProvisioner(Provisioner):
    """
    Provisioner fake. Handles are readable strings:
    resources "res:/v1/book", functions "fn:<construct id>".
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.functions: Dict[str, Dict[str, Any]] = {}
        self.methods: List[Dict[str, Any]] = []
        self.authorizers: List[Dict[str, Any]] = []
        self.grants: List[tuple] = []

    @property
    def root_resource(self) -> str:
        return "res:/"

    def create_resource(self, parent: str, path_segment: str) -> str:
        parent_path = parent[len("res:"):]
        path = f"/{path_segment}" if parent_path == "/" else f"{parent_path}/{path_segment}"
        self.calls.append(("resource", path))
        return f"res:{path}"

    def create_function(self, construct_id: str, props: Dict[str, Any]) -> str:
        if construct_id in self.functions:
            raise ValueError(f"Duplicate construct id {construct_id}")
        self.functions[construct_id] = props
        self.calls.append(("function", construct_id))
        return f"fn:{construct_id}"

    def create_method(
        self,
        resource: str,
        http_method: str,
        function: str,
        method_options: Dict[str, Any],
        integration_options: Optional[Dict[str, Any]] = None
    ) -> str:
        self.methods.append({
            "resource": resource[len("res:"):],
            "http_method": http_method,
            "function": function,
            "options": method_options,
            "integration_options": integration_options or {},
        })
        self.calls.append(("method", resource[len("res:"):], http_method))
        return f"method:{http_method}:{resource}"

    def create_layer(self, code_path: str) -> str:
        self.calls.append(("layer", code_path))
        return "layer:shared"

    def create_authorizer(self, function: str, configuration: Dict[str, Any]) -> str:
        self.authorizers.append({"function": function, "configuration": configuration})
        self.calls.append(("authorizer", function))
        return f"authorizer:{function}"

    def create_api_key(self, burst_limit: int, rate_limit: int) -> str:
        self.calls.append(("api_key", burst_limit, rate_limit))
        return "api-key"

    def create_model(self, name: str, definition: Dict[str, Any]) -> str:
        self.calls.append(("model", name))
        return f"model:{name}"

    def create_request_validator(self, name: str, definition: Dict[str, Any]) -> str:
        self.calls.append(("validator", name))
        return f"validator:{name}"

    def grant_table_access(self, function: str, table: Any) -> None:
        self.grants.append((function, table))

    def table_name(self, table: Any) -> str:
        return f"{table}-deployed"

    def method(self, path: str, http_method: str) -> Dict[str, Any]:
        matches = [
            m for m in self.methods
            if m["resource"] == path and m["http_method"] == http_method
        ]
        assert len(matches) == 1, f"expected one {http_method} at {path}, got {len(matches)}"
        return matches[0]

    def resource_paths(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "resource"]


def make_tree(root: Path, *directories: str) -> Path:
    """Create each slash-separated directory under root."""
    for directory in directories:
        (root / directory).mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def temp_repo():
    """Create a temporary directory to hold a source tree."""
    temp_dir = tempfile.mkdtemp()
    repo_root = Path(temp_dir)

    yield repo_root

    # Cleanup
    shutil.rmtree(temp_dir)


@pytest.fixture
def source_root(temp_repo):
    """The src/ directory inside the temporary repository (not created)."""
    return temp_repo / "src"


@pytest.fixture
def provisioner():
    return RecordingProvisioner()


@pytest.fixture
def tree_factory():
    return make_tree


@pytest.fixture
def defaults():
    return FunctionDefaults(runtime="PYTHON_3_12", handler="index.handler", log_retention="ONE_WEEK")


@pytest.fixture
def provisioner_factory():
    return RecordingProvisioner
