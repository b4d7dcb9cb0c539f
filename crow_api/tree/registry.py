# AGPL-3.0 License

"""
Name-keyed registries for provisioned handles.
"""

from typing import Any, Dict, Iterator, List, Optional

from crow_api.errors import DuplicateReferenceError, UnknownReferenceError


class Registry:
    """
    Maps a symbolic name (or API path) to an opaque provisioned handle.

    Looking up a name that was never registered raises
    UnknownReferenceError instead of returning None, so a typo in a
    method configuration fails the build.
    """

    def __init__(self, kind: str):
        """
        Args:
            kind: What the registry holds, used in error messages (e.g. "model")
        """
        self.kind = kind
        self._handles: Dict[str, Any] = {}

    def register(self, name: str, handle: Any) -> None:
        if name in self._handles:
            raise DuplicateReferenceError(f"Duplicate {self.kind} '{name}'")
        self._handles[name] = handle

    def resolve(self, name: str, api_path: str = "") -> Any:
        """
        Return the handle registered under name.

        Args:
            name: Registered name
            api_path: Path of the method doing the lookup, for error messages

        Raises:
            UnknownReferenceError: If nothing is registered under name
        """
        try:
            return self._handles[name]
        except KeyError:
            raise UnknownReferenceError(self.kind, name, api_path) from None

    def get(self, name: str, default: Optional[Any] = None) -> Any:
        return self._handles.get(name, default)

    def names(self) -> List[str]:
        return list(self._handles)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._handles)

    def __getitem__(self, name: str) -> Any:
        return self.resolve(name)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"Registry(kind={self.kind!r}, names={self.names()!r})"


def function_registry() -> Registry:
    """API path (e.g. "/v1/authors/get") -> function handle."""
    return Registry("function")


def model_registry() -> Registry:
    return Registry("model")


def validator_registry() -> Registry:
    return Registry("request validator")
