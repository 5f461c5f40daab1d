# =============================================================================
# core/geocoding.py  -  The "geocode" tool (OpenStreetMap Nominatim)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends ONE GET to the Nominatim search endpoint and formats each match as
#   a numbered block:
#
#     검색어: "Seoul" (국가: KR)
#
#     결과 1:
#     주소: 서울특별시, 대한민국
#     위도: 37.5666791
#     경도: 126.9782914
#     국가 코드: KR
#     중요도: 0.8228
#     도시: 서울특별시
#
# NOMINATIM USAGE POLICY:
#   Every request must carry an identifying User-Agent (Settings.user_agent).
#
# EMPTY RESULTS:
#   "No match" is a normal answer, not an error: the tool returns plain text
#   saying nothing was found.
# =============================================================================

import logging
from typing import Any, Optional

from core.context import ToolContext
from core.errors import UpstreamRequestError
from core.models import InvocationResult
from core.schemas import GeocodeInput

logger = logging.getLogger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"

# Nominatim returns whichever of these fits the place; first one wins.
_CITY_KEYS = ("city", "town", "village", "municipality", "hamlet")


def build_query_params(args: GeocodeInput) -> dict[str, str]:
    params = {
        "q": args.address,
        "format": "json",
        "limit": str(args.limit),
        "addressdetails": "1",
    }
    if args.country:
        params["countrycodes"] = args.country.lower()
    return params


def format_match(index: int, match: dict[str, Any]) -> str:
    """Format one Nominatim match; absent fields are left out."""
    lines = [
        f"결과 {index}:",
        f"주소: {match.get('display_name', '알 수 없음')}",
        f"위도: {match.get('lat')}",
        f"경도: {match.get('lon')}",
    ]

    details = match.get("address") or {}
    country_code = details.get("country_code")
    if country_code:
        lines.append(f"국가 코드: {country_code.upper()}")

    importance = _as_float(match.get("importance"))
    if importance is not None:
        lines.append(f"중요도: {importance:.4f}")

    city = next((details[key] for key in _CITY_KEYS if details.get(key)), None)
    if city:
        lines.append(f"도시: {city}")
    if details.get("state"):
        lines.append(f"주/도: {details['state']}")
    if details.get("postcode"):
        lines.append(f"우편번호: {details['postcode']}")

    return "\n".join(lines)


def format_results(args: GeocodeInput, matches: list[dict[str, Any]]) -> str:
    header = f'검색어: "{args.address}"'
    if args.country:
        header += f" (국가: {args.country.upper()})"
    blocks = [format_match(i, match) for i, match in enumerate(matches[: args.limit], start=1)]
    return header + "\n\n" + "\n\n".join(blocks)


def no_results_message(address: str) -> str:
    return f'주소 "{address}"에 대한 검색 결과가 없습니다.'


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


async def geocode(args: GeocodeInput, context: ToolContext) -> InvocationResult:
    """Look ``args.address`` up on Nominatim.

    Raises:
        UpstreamRequestError: non-2xx status, transport error, timeout, or a
            body that is not JSON.
    """
    response = await context.get(
        NOMINATIM_SEARCH_URL,
        params=build_query_params(args),
        headers={
            "User-Agent": context.settings.user_agent,
            "Accept": "application/json",
        },
    )
    if not response.is_success:
        raise UpstreamRequestError.from_status(response.status_code)

    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamRequestError("API 요청 실패: 잘못된 JSON 응답") from exc

    if not isinstance(data, list) or not data:
        logger.info("No geocoding results for %r", args.address)
        return InvocationResult.text(no_results_message(args.address))

    return InvocationResult.text(format_results(args, data))
