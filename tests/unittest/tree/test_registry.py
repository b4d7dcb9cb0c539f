"""
Unit tests for Registry class.
"""

import pytest

from crow_api.errors import CrowApiError, DuplicateReferenceError, UnknownReferenceError
from crow_api.tree.registry import Registry, model_registry


class TestRegistry:

    def test_register_and_resolve(self):
        registry = Registry("model")
        registry.register("authorsPost", "handle")

        assert registry.resolve("authorsPost") == "handle"
        assert registry["authorsPost"] == "handle"
        assert "authorsPost" in registry
        assert len(registry) == 1
        assert list(registry) == ["authorsPost"]

    def test_unknown_name_raises(self):
        registry = model_registry()

        with pytest.raises(UnknownReferenceError) as exc_info:
            registry.resolve("missing", "/v1/authors/post")

        assert exc_info.value.kind == "model"
        assert "missing" in str(exc_info.value)
        assert "/v1/authors/post" in str(exc_info.value)

    def test_unknown_name_is_key_error(self):
        with pytest.raises(KeyError):
            Registry("model")["missing"]

    def test_duplicate_name_raises(self):
        registry = Registry("request validator")
        registry.register("validateBody", 1)

        with pytest.raises(DuplicateReferenceError):
            registry.register("validateBody", 2)

    def test_errors_share_base_class(self):
        assert issubclass(UnknownReferenceError, CrowApiError)
        assert issubclass(DuplicateReferenceError, CrowApiError)

    def test_get_and_to_dict(self):
        registry = Registry("function")
        registry.register("/v1/get", "fn")

        assert registry.get("/v2/get") is None
        assert registry.to_dict() == {"/v1/get": "fn"}
        assert registry.names() == ["/v1/get"]
