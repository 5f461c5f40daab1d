# =============================================================================
# core/clock.py  -  The "getTime" tool
# =============================================================================
#
# Resolves an IANA zone with zoneinfo and formats "now" as
# YYYY-MM-DD HH:MM:SS (24h).  An identifier zoneinfo cannot load is always
# an InvalidTimezoneError, never a silently wrong (e.g. UTC) time.
# =============================================================================

from datetime import datetime, timezone as dt_timezone
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import InvalidTimezoneError
from core.models import InvocationResult
from core.schemas import TimeInput, TimeOutput

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


def resolve_timezone(name: str) -> ZoneInfo:
    """Load ``name`` as a ZoneInfo.

    Raises:
        InvalidTimezoneError: unknown zone, or a key zoneinfo rejects outright
            (absolute paths, "..", empty strings) and zone directories such as
            "America".
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezoneError(name) from exc


def current_time_in(name: str, now: Callable[[], datetime] = _utc_now) -> datetime:
    return now().astimezone(resolve_timezone(name))


async def get_time(args: TimeInput, context=None, now: Callable[[], datetime] = _utc_now) -> InvocationResult:
    local = current_time_in(args.timezone, now=now)
    formatted = local.strftime(TIME_FORMAT)
    structured = TimeOutput(timezone=args.timezone, time=formatted, iso=local.isoformat())
    return InvocationResult.text(
        f"Timezone: {args.timezone}\n현재 시간: {formatted}",
        structured=structured.model_dump(),
    )
