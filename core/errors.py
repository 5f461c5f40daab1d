# =============================================================================
# core/errors.py  -  Exception hierarchy for the toolbox
# =============================================================================
#
# Every failure a tool can hit is one of these classes.  Handlers RAISE them;
# the registry (core/registry.py) catches them and turns them into an
# error-flagged InvocationResult, so the caller always gets readable text and
# the server process never goes down because of one bad call.
#
#   ToolboxError
#   ├── RegistryError
#   │   ├── DuplicateToolError        (startup: same name registered twice)
#   │   └── ToolNotFoundError         (invoke: unknown tool name)
#   ├── ToolValidationError           (bad input, before the handler runs)
#   ├── UpstreamRequestError          (HTTP status / transport / timeout)
#   ├── UpstreamAPIError              (API answered, but reported an error)
#   ├── DomainError
#   │   ├── DivisionByZeroError
#   │   ├── UnsupportedOperatorError
#   │   └── InvalidTimezoneError
#   ├── MissingCredentialError        (HF_TOKEN absent)
#   └── ImageGenerationError
#
# Messages are user-facing (Korean, like the rest of the tool output).
# =============================================================================

from typing import Optional


class ToolboxError(Exception):
    """Base class for every error raised by the toolbox."""


# -----------------------------------------------------------------------------
# Registry errors
# -----------------------------------------------------------------------------
class RegistryError(ToolboxError):
    pass


class DuplicateToolError(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"이미 등록된 도구입니다: {name}")


class ToolNotFoundError(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"도구를 찾을 수 없습니다: {name}")


class ToolValidationError(ToolboxError):
    """Raised when a raw argument bag does not match the tool's input schema.

    Attributes:
        tool_name: The tool whose schema was violated.
        field: Dotted path of the first offending field (e.g. "limit").
        messages: One "field: message" string per pydantic error.
    """

    def __init__(self, tool_name: str, field: str, messages: list[str]):
        self.tool_name = tool_name
        self.field = field
        self.messages = messages
        super().__init__(
            f"'{tool_name}' 입력값 검증 실패 ({field}): " + "; ".join(messages)
        )


# -----------------------------------------------------------------------------
# Upstream errors
# -----------------------------------------------------------------------------
class UpstreamRequestError(ToolboxError):
    """Non-success HTTP status, transport failure or timeout."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_status(cls, status_code: int) -> "UpstreamRequestError":
        return cls(f"API 요청 실패: {status_code}", status_code=status_code)


class UpstreamAPIError(ToolboxError):
    """The upstream API responded but flagged an error of its own."""

    def __init__(self, reason: str, label: str = "API 오류"):
        self.reason = reason
        super().__init__(f"{label}: {reason}")


# -----------------------------------------------------------------------------
# Domain errors (handler-local invariants)
# -----------------------------------------------------------------------------
class DomainError(ToolboxError):
    pass


class DivisionByZeroError(DomainError):
    def __init__(self):
        super().__init__("오류: 0으로 나눌 수 없습니다.")


class UnsupportedOperatorError(DomainError):
    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"오류: 지원하지 않는 연산자입니다: {operator}")


class InvalidTimezoneError(DomainError):
    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"유효하지 않은 timezone입니다: {timezone}")


# -----------------------------------------------------------------------------
# Credential / image generation
# -----------------------------------------------------------------------------
class MissingCredentialError(ToolboxError):
    def __init__(self, variable: str = "HF_TOKEN"):
        self.variable = variable
        super().__init__(
            f"{variable} 환경 변수가 설정되지 않았습니다. "
            f"서버 설정 또는 환경 변수로 {variable} 값을 제공해 주세요."
        )


class ImageGenerationError(ToolboxError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            f"이미지 생성 오류: {detail} (HF_TOKEN이 올바른지 확인하세요)"
        )
