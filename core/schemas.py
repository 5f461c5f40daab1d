# =============================================================================
# core/schemas.py  -  Input/output records for every tool
# =============================================================================
#
# Each tool's argument bag is described by one pydantic model.  The model is
# both the CONTRACT (its JSON schema is what MCP clients see in tools/list)
# and the VALIDATOR (core/registry.py runs model_validate on the raw bag).
#
# Field descriptions are the text an LLM reads when deciding what to pass,
# so they are written for the caller, in the server's language.
# =============================================================================

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StrictInput(BaseModel):
    """Base for tool inputs: values must already have the declared JSON type.

    Strict mode rejects "10" or true for a number and "3" for an integer.
    An int is still accepted where a float is declared.
    """

    model_config = ConfigDict(strict=True)


class GreetInput(StrictInput):
    name: str = Field(description="인사할 사람의 이름")
    language: Literal["ko", "en"] = Field(
        default="en", description="인사 언어 (기본값: en)"
    )


class CalculatorInput(StrictInput):
    num1: float = Field(description="첫 번째 숫자", allow_inf_nan=False)
    num2: float = Field(description="두 번째 숫자", allow_inf_nan=False)
    operator: Literal["+", "-", "*", "/"] = Field(description="연산자 (+, -, *, /)")


class CalculatorOutput(BaseModel):
    num1: float
    num2: float
    operator: str
    result: float


class TimeInput(StrictInput):
    timezone: str = Field(
        min_length=1,
        description="시간대 (예: Asia/Seoul, America/New_York, Europe/London, "
        "UTC 등 IANA Timezone 형식)",
    )


class TimeOutput(BaseModel):
    timezone: str
    time: str = Field(description="YYYY-MM-DD HH:MM:SS (24시간제)")
    iso: str = Field(description="ISO 8601 형식의 현재 시각 (UTC 오프셋 포함)")


class GeocodeInput(StrictInput):
    address: str = Field(min_length=1, description="검색할 도시 이름이나 주소")
    limit: int = Field(
        default=1, ge=1, le=10, description="반환할 결과의 최대 개수 (1-10, 기본값: 1)"
    )
    country: Optional[str] = Field(
        default=None,
        pattern=r"^[A-Za-z]{2}$",
        description="국가 코드로 검색 결과 제한 (ISO 3166-1 alpha-2 형식, 예: KR)",
    )


class WeatherInput(StrictInput):
    latitude: float = Field(ge=-90, le=90, description="위도 좌표 (-90 ~ 90)")
    longitude: float = Field(ge=-180, le=180, description="경도 좌표 (-180 ~ 180)")
    forecast_days: int = Field(default=7, ge=1, le=16, description="예보 일수 (1-16일, 기본값: 7)")
    timezone: Optional[str] = Field(
        default=None,
        description="결과 시간대 (예: Asia/Seoul). 생략하면 좌표 기준으로 자동 결정",
    )


class ImageInput(StrictInput):
    prompt: str = Field(min_length=1, description="이미지 생성을 위한 텍스트 프롬프트")
