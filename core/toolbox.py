# =============================================================================
# core/toolbox.py  -  The six tool definitions, wired into one registry
# =============================================================================
#
# TOOL NAMES are part of the public contract and must not change:
#   greet, calculator, getTime, geocode, get-weather, generate-image
#
# Descriptions are what an LLM reads to decide WHEN to call a tool.
# =============================================================================

from typing import Optional

from core.calculator import calculator
from core.clock import get_time
from core.context import ToolContext
from core.geocoding import geocode
from core.greeting import greet
from core.image_generation import generate_image
from core.models import ToolDefinition
from core.registry import ToolRegistry
from core.schemas import (
    CalculatorInput,
    CalculatorOutput,
    GeocodeInput,
    GreetInput,
    ImageInput,
    TimeInput,
    TimeOutput,
    WeatherInput,
)
from core.weather import get_weather

TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="greet",
        title="Greeting",
        description="이름과 언어를 입력하면 인사말을 반환합니다.",
        input_model=GreetInput,
        handler=greet,
    ),
    ToolDefinition(
        name="calculator",
        title="Calculator",
        description="두 개의 숫자와 연산자를 입력받아 사칙연산 결과를 반환합니다.",
        input_model=CalculatorInput,
        output_model=CalculatorOutput,
        handler=calculator,
    ),
    ToolDefinition(
        name="getTime",
        title="Current time",
        description="Timezone을 입력받아 해당 시간대의 현재 시간을 반환합니다.",
        input_model=TimeInput,
        output_model=TimeOutput,
        handler=get_time,
    ),
    ToolDefinition(
        name="geocode",
        title="Geocoding",
        description="도시 이름이나 주소를 입력받아 위도와 경도 좌표를 반환합니다.",
        input_model=GeocodeInput,
        handler=geocode,
    ),
    ToolDefinition(
        name="get-weather",
        title="Weather forecast",
        description=(
            "위도와 경도 좌표를 입력받아 현재 날씨, 일별 예보, "
            "향후 24시간 시간별 예보를 제공합니다."
        ),
        input_model=WeatherInput,
        handler=get_weather,
    ),
    ToolDefinition(
        name="generate-image",
        title="Image generation",
        description="텍스트 프롬프트를 입력받아 AI 이미지를 생성합니다. (HF_TOKEN 필요)",
        input_model=ImageInput,
        handler=generate_image,
    ),
)


def build_registry(context: Optional[ToolContext] = None) -> ToolRegistry:
    """Create a registry holding every toolbox tool.

    Raises:
        DuplicateToolError: two definitions share a name.
    """
    registry = ToolRegistry(context)
    for definition in TOOL_DEFINITIONS:
        registry.register(definition)
    return registry
