# AGPL-3.0 License

"""
Exceptions raised while compiling a source tree into an API.
"""


class CrowApiError(Exception):
    """Base class for all crow-api build errors."""


class UnknownReferenceError(CrowApiError, KeyError):
    """
    A method configuration referenced a model or request validator
    name that was never declared.
    """

    def __init__(self, kind: str, name: str, api_path: str = ""):
        self.kind = kind
        self.name = name
        self.api_path = api_path
        location = f" (referenced by {api_path})" if api_path else ""
        super().__init__(f"Unknown {kind} '{name}'{location}")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateReferenceError(CrowApiError):
    """Two registry entries were declared under the same name."""
