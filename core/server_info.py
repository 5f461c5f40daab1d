# =============================================================================
# core/server_info.py  -  Document behind the "server://info" resource
# =============================================================================
#
# Read-only.  Combines constants (name, version, resource list) with live
# process data (uptime, timestamp).  The tool catalog is read from the
# registered ToolDefinitions, so parameter descriptions always match the
# schemas clients actually see.
# =============================================================================

import platform
import sys
import time
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from core.registry import ToolRegistry

SERVER_NAME = "everyday-toolbox"
SERVER_VERSION = "1.0.0"
SERVER_DESCRIPTION = (
    "인사, 계산, 시간 조회, 지오코딩, 날씨 예보, AI 이미지 생성을 제공하는 MCP 서버"
)
SERVER_INFO_URI = "server://info"

RESOURCES = [
    {
        "uri": SERVER_INFO_URI,
        "name": "server-info",
        "description": "서버 정보, 가동 시간, 사용 가능한 도구 목록",
        "mimeType": "application/json",
    },
]

# Process start, captured when the module is first imported.
PROCESS_STARTED = time.monotonic()


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if days:
        parts.append(f"{days}일")
    if hours or days:
        parts.append(f"{hours}시간")
    if minutes or hours or days:
        parts.append(f"{minutes}분")
    parts.append(f"{secs}초")
    return " ".join(parts)


def describe_parameter(info: FieldInfo) -> str:
    """Human-readable one-liner for a schema field: description, bounds, default."""
    text = info.description or ""
    notes = []
    for constraint in info.metadata:
        for attr, label in (("ge", "최소"), ("le", "최대"), ("min_length", "최소 길이")):
            value = getattr(constraint, attr, None)
            if value is not None:
                notes.append(f"{label} {value}")
    if info.is_required():
        notes.append("필수")
    elif info.default is not PydanticUndefined and info.default is not None:
        notes.append(f"기본값 {info.default}")
    else:
        notes.append("선택")
    return f"{text} [{', '.join(notes)}]" if text else ", ".join(notes)


def tool_catalog(registry: ToolRegistry) -> list[dict[str, Any]]:
    return [
        {
            "name": definition.name,
            "description": definition.description,
            "parameters": {
                name: describe_parameter(info)
                for name, info in definition.input_model.model_fields.items()
            },
        }
        for definition in registry.definitions()
    ]


def build_server_info(
    registry: ToolRegistry,
    started_at: float = PROCESS_STARTED,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    uptime = max(0.0, time.monotonic() - started_at)
    now = now or datetime.now(timezone.utc)
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": SERVER_DESCRIPTION,
        "status": "running",
        "uptime_seconds": round(uptime, 3),
        "uptime": format_uptime(uptime),
        "timestamp": now.isoformat(),
        "runtime": {
            "python": sys.version.split()[0],
            "platform": platform.platform(),
        },
        "image_generation_enabled": registry.context.settings.image_generation_enabled,
        "tools": tool_catalog(registry),
        "resources": RESOURCES,
    }
