# AGPL-3.0 License

"""
Abstract provisioning interface used by the graph builder.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Provisioner(ABC):
    """
    Creates the cloud resources the graph builder asks for.

    Every create call returns an opaque handle. Handles are passed back
    into later calls (a resource handle as the parent of a new resource,
    a function handle as the target of a method) and are never inspected
    by the builder. Failures raise; the builder does not catch them.
    """

    @property
    @abstractmethod
    def root_resource(self) -> Any:
        """Handle of the gateway's root resource ("/")."""
        pass

    @abstractmethod
    def create_resource(self, parent: Any, path_segment: str) -> Any:
        """
        Create a gateway resource under parent.

        Args:
            parent: Parent resource handle
            path_segment: Path part of the new resource

        Returns:
            Resource handle
        """
        pass

    @abstractmethod
    def create_function(self, construct_id: str, props: Dict[str, Any]) -> Any:
        """
        Create a function.

        Args:
            construct_id: Unique id for the function
            props: Effective function properties; props["code"] is the code
                directory unless the caller overrode it

        Returns:
            Function handle
        """
        pass

    @abstractmethod
    def create_method(
        self,
        resource: Any,
        http_method: str,
        function: Any,
        method_options: Dict[str, Any],
        integration_options: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Bind an HTTP method on resource to function.

        Args:
            resource: Resource handle
            http_method: Uppercase HTTP verb
            function: Function handle to integrate with
            method_options: Resolved method options (handles, not names)
            integration_options: Options for the function integration

        Returns:
            Method handle
        """
        pass

    @abstractmethod
    def create_layer(self, code_path: str) -> Any:
        """Package code_path once as a layer shared by every function."""
        pass

    @abstractmethod
    def create_authorizer(self, function: Any, configuration: Dict[str, Any]) -> Any:
        """
        Wrap function in a token authorizer.

        Args:
            function: Authorizer function handle
            configuration: Authorizer options; "results_cache_ttl" may be
                given in seconds

        Returns:
            Authorizer handle
        """
        pass

    @abstractmethod
    def create_api_key(self, burst_limit: int, rate_limit: int) -> Any:
        """Create an API key and a usage plan bound to the deployed stage."""
        pass

    @abstractmethod
    def create_model(self, name: str, definition: Dict[str, Any]) -> Any:
        pass

    @abstractmethod
    def create_request_validator(self, name: str, definition: Dict[str, Any]) -> Any:
        pass

    @abstractmethod
    def grant_table_access(self, function: Any, table: Any) -> None:
        pass

    @abstractmethod
    def table_name(self, table: Any) -> str:
        pass
