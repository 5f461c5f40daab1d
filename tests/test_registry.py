"""
Tests for the tool registry & dispatcher.

Covers registration, lookup, schema validation with defaults, and the
conversion of handler failures into error-flagged results.
"""

import pytest

from core.errors import (
    DuplicateToolError,
    ToolboxError,
    ToolNotFoundError,
    ToolValidationError,
)
from core.models import InvocationRequest, InvocationResult, ToolDefinition
from core.registry import ToolRegistry
from core.schemas import GreetInput
from core.toolbox import TOOL_DEFINITIONS


def _definition(name="probe", handler=None):
    async def default_handler(args, context):
        return InvocationResult.text(f"hello {args.name}")

    return ToolDefinition(
        name=name,
        description="test tool",
        input_model=GreetInput,
        handler=handler or default_handler,
    )


class TestRegistration:
    def test_all_tools_registered(self, registry):
        assert registry.names() == [
            "greet",
            "calculator",
            "getTime",
            "geocode",
            "get-weather",
            "generate-image",
        ]
        assert len(registry) == len(TOOL_DEFINITIONS)
        assert "geocode" in registry

    def test_duplicate_name_is_rejected(self):
        registry = ToolRegistry()
        registry.register(_definition())
        with pytest.raises(DuplicateToolError, match="probe"):
            registry.register(_definition())

    def test_unknown_tool_lookup(self, registry):
        with pytest.raises(ToolNotFoundError):
            registry.get("nope")


class TestValidation:
    def test_defaults_are_applied(self, registry):
        assert registry.validate("greet", {"name": "Tom"}).language == "en"
        assert registry.validate("geocode", {"address": "Seoul"}).limit == 1
        assert registry.validate("get-weather", {"latitude": 1, "longitude": 2}).forecast_days == 7

    def test_integers_are_accepted_for_float_fields(self, registry):
        args = registry.validate("calculator", {"num1": 10, "num2": 4, "operator": "/"})
        assert args.num1 == 10.0

    @pytest.mark.parametrize(
        "tool, args, field",
        [
            ("greet", {}, "name"),
            ("greet", {"name": "Tom", "language": "fr"}, "language"),
            ("calculator", {"num1": 1, "num2": 2, "operator": "%"}, "operator"),
            ("calculator", {"num1": "abc", "num2": 2, "operator": "+"}, "num1"),
            ("calculator", {"num1": "10", "num2": 4, "operator": "/"}, "num1"),
            ("calculator", {"num1": True, "num2": 4, "operator": "/"}, "num1"),
            ("calculator", {"num1": 1, "num2": False, "operator": "+"}, "num2"),
            ("greet", {"name": 42}, "name"),
            ("geocode", {"address": "Seoul", "limit": "3"}, "limit"),
            ("geocode", {"address": "Seoul", "limit": 2.0}, "limit"),
            ("get-weather", {"latitude": "37.5", "longitude": 0}, "latitude"),
            ("geocode", {"address": "Seoul", "limit": 11}, "limit"),
            ("geocode", {"address": "Seoul", "limit": 0}, "limit"),
            ("geocode", {"address": "Seoul", "country": "KOR"}, "country"),
            ("get-weather", {"latitude": 91, "longitude": 0}, "latitude"),
            ("get-weather", {"latitude": 0, "longitude": -181}, "longitude"),
            ("get-weather", {"latitude": 0, "longitude": 0, "forecast_days": 17}, "forecast_days"),
            ("generate-image", {"prompt": ""}, "prompt"),
        ],
    )
    def test_invalid_arguments_name_the_field(self, registry, tool, args, field):
        with pytest.raises(ToolValidationError) as excinfo:
            registry.validate(tool, args)
        assert excinfo.value.field == field
        assert excinfo.value.tool_name == tool
        assert field in str(excinfo.value)

    def test_none_arguments_are_an_empty_bag(self, registry):
        with pytest.raises(ToolValidationError) as excinfo:
            registry.validate("greet", None)
        assert excinfo.value.field == "name"


class TestInvoke:
    @pytest.mark.asyncio
    async def test_unknown_tool_is_not_found(self, registry):
        with pytest.raises(ToolNotFoundError, match="nope"):
            await registry.invoke("nope", {})

    @pytest.mark.asyncio
    async def test_validation_happens_before_handler(self):
        called = []

        async def handler(args, context):
            called.append(args)
            return InvocationResult.text("ran")

        registry = ToolRegistry()
        registry.register(_definition(handler=handler))
        with pytest.raises(ToolValidationError):
            await registry.invoke("probe", {})
        assert called == []

    @pytest.mark.asyncio
    async def test_handler_result_is_returned_unchanged(self):
        registry = ToolRegistry()
        registry.register(_definition())
        result = await registry.dispatch(InvocationRequest("probe", {"name": "Ann"}))
        assert result.first_text == "hello Ann"
        assert result.is_error is False

    @pytest.mark.asyncio
    async def test_toolbox_error_becomes_error_result(self):
        async def handler(args, context):
            raise ToolboxError("upstream unhappy")

        registry = ToolRegistry()
        registry.register(_definition(handler=handler))
        result = await registry.invoke("probe", {"name": "Ann"})
        assert result.is_error is True
        assert result.first_text == "upstream unhappy"

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_error_result(self):
        async def handler(args, context):
            raise RuntimeError("kaboom")

        registry = ToolRegistry()
        registry.register(_definition(handler=handler))
        result = await registry.invoke("probe", {"name": "Ann"})
        assert result.is_error is True
        assert len(result.content) == 1
        assert "kaboom" in result.first_text


class TestInvocationResult:
    def test_requires_content(self):
        with pytest.raises(ValueError):
            InvocationResult(content=[])

    def test_envelope_shape(self):
        ok = InvocationResult.text("3", structured={"result": 3})
        assert ok.to_dict() == {
            "content": [{"type": "text", "text": "3"}],
            "structuredContent": {"result": 3},
        }
        err = InvocationResult.error("bad")
        assert err.to_dict() == {"content": [{"type": "text", "text": "bad"}], "isError": True}
        image = InvocationResult.image("aGk=")
        assert image.to_dict()["content"] == [
            {"type": "image", "data": "aGk=", "mimeType": "image/png"}
        ]
