# =============================================================================
# core/registry.py  -  Tool Registry & Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns the name -> ToolDefinition mapping and routes every invocation:
#
#     invoke(name, raw_args)
#       1. look the tool up               -> ToolNotFoundError
#       2. validate raw_args              -> ToolValidationError
#          (pydantic model; defaults such as language="en" are applied here)
#       3. call the handler with the typed record + the shared ToolContext
#       4. handler raised?                -> error-flagged InvocationResult
#
#   Steps 1-2 raise, because they describe a bad REQUEST.  Step 4 never
#   raises: a failing handler is reported to the caller as text with
#   is_error=True, and the registry keeps serving other calls.
#
# The mapping is filled once at startup (core/toolbox.py) and only read
# afterwards, so concurrent invocations need no locking.
# =============================================================================

import logging
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ValidationError

from core.context import ToolContext
from core.errors import (
    DuplicateToolError,
    ToolboxError,
    ToolNotFoundError,
    ToolValidationError,
)
from core.models import InvocationRequest, InvocationResult, ToolDefinition

logger = logging.getLogger(__name__)


def validate_arguments(definition: ToolDefinition, raw_args: Optional[dict[str, Any]]) -> BaseModel:
    """Turn an untyped argument bag into the tool's typed input record.

    Pure function: no I/O, no handler call.

    Raises:
        ToolValidationError: naming the first offending field.
    """
    try:
        return definition.input_model.model_validate(raw_args or {})
    except ValidationError as exc:
        errors = exc.errors()
        messages = [f"{_loc(err)}: {err['msg']}" for err in errors]
        raise ToolValidationError(definition.name, _loc(errors[0]), messages) from exc


def _loc(error: dict) -> str:
    return ".".join(str(part) for part in error.get("loc", ())) or "(root)"


class ToolRegistry:
    """Name -> ToolDefinition map plus the invocation pipeline."""

    def __init__(self, context: Optional[ToolContext] = None):
        self.context = context or ToolContext()
        self._tools: dict[str, ToolDefinition] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------
    def register(self, definition: ToolDefinition) -> ToolDefinition:
        if definition.name in self._tools:
            raise DuplicateToolError(definition.name)
        self._tools[definition.name] = definition
        logger.debug("Registered tool %s", definition.name)
        return definition

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------
    def validate(self, name: str, raw_args: Optional[dict[str, Any]]) -> BaseModel:
        return validate_arguments(self.get(name), raw_args)

    async def invoke(self, name: str, raw_args: Optional[dict[str, Any]] = None) -> InvocationResult:
        """Validate ``raw_args`` and run the named tool.

        Raises:
            ToolNotFoundError: ``name`` is not registered.
            ToolValidationError: ``raw_args`` violates the input schema.

        Returns:
            The handler's result unchanged, or an error-flagged result with a
            single text block if the handler raised.
        """
        definition = self.get(name)
        args = validate_arguments(definition, raw_args)

        try:
            return await definition.handler(args, self.context)
        except ToolboxError as exc:
            logger.info("Tool %s failed: %s", name, exc)
            return InvocationResult.error(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error in tool %s", name)
            return InvocationResult.error(f"도구 실행 중 오류가 발생했습니다: {exc}")

    async def dispatch(self, request: InvocationRequest) -> InvocationResult:
        return await self.invoke(request.tool_name, request.arguments)
