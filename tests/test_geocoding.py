"""
Tests for the geocode tool against a mocked Nominatim endpoint.
"""

import httpx
import pytest

from core.geocoding import NOMINATIM_SEARCH_URL

from _helpers import RecordingHandler

SEOUL = {
    "display_name": "서울특별시, 대한민국",
    "lat": "37.5666791",
    "lon": "126.9782914",
    "importance": 0.822838,
    "address": {
        "city": "서울특별시",
        "postcode": "04524",
        "country_code": "kr",
    },
}
BUSAN = {
    "display_name": "부산광역시, 대한민국",
    "lat": "35.1799528",
    "lon": "129.0752365",
    "address": {"city": "부산광역시", "state": "부산", "country_code": "kr"},
}
SPRINGFIELD = {
    "display_name": "Springfield, Sangamon County, Illinois, United States",
    "lat": "39.7990175",
    "lon": "-89.6439575",
    "importance": "0.6",
    "address": {"town": "Springfield", "state": "Illinois", "country_code": "us"},
}


class TestGeocode:
    @pytest.mark.asyncio
    async def test_request_parameters_and_headers(self, make_registry, settings):
        handler = RecordingHandler(json=[SEOUL])
        registry = make_registry(handler)

        await registry.invoke("geocode", {"address": "Seoul", "limit": 3, "country": "KR"})

        request = handler.last_request
        assert str(request.url).startswith(NOMINATIM_SEARCH_URL)
        assert request.method == "GET"
        assert dict(request.url.params) == {
            "q": "Seoul",
            "format": "json",
            "limit": "3",
            "addressdetails": "1",
            "countrycodes": "kr",
        }
        assert request.headers["User-Agent"] == settings.user_agent
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_country_is_omitted_when_not_given(self, make_registry):
        handler = RecordingHandler(json=[SEOUL])
        await make_registry(handler).invoke("geocode", {"address": "Seoul"})
        assert "countrycodes" not in handler.last_request.url.params
        assert handler.last_request.url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_formats_a_match(self, make_registry):
        registry = make_registry(RecordingHandler(json=[SEOUL]))
        result = await registry.invoke("geocode", {"address": "Seoul", "country": "kr"})

        assert result.is_error is False
        assert result.first_text == (
            '검색어: "Seoul" (국가: KR)\n'
            "\n"
            "결과 1:\n"
            "주소: 서울특별시, 대한민국\n"
            "위도: 37.5666791\n"
            "경도: 126.9782914\n"
            "국가 코드: KR\n"
            "중요도: 0.8228\n"
            "도시: 서울특별시\n"
            "우편번호: 04524"
        )

    @pytest.mark.asyncio
    async def test_optional_details_are_omitted(self, make_registry):
        registry = make_registry(RecordingHandler(json=[BUSAN]))
        result = await registry.invoke("geocode", {"address": "Busan"})
        assert "중요도" not in result.first_text
        assert "우편번호" not in result.first_text
        assert "주/도: 부산" in result.first_text

    @pytest.mark.asyncio
    async def test_town_counts_as_city(self, make_registry):
        registry = make_registry(RecordingHandler(json=[SPRINGFIELD]))
        result = await registry.invoke("geocode", {"address": "Springfield"})
        assert "도시: Springfield" in result.first_text
        assert "중요도: 0.6000" in result.first_text

    @pytest.mark.asyncio
    async def test_never_lists_more_than_limit(self, make_registry):
        registry = make_registry(RecordingHandler(json=[SEOUL, BUSAN, SPRINGFIELD]))
        result = await registry.invoke("geocode", {"address": "city", "limit": 2})

        text = result.first_text
        assert text.count("결과 ") == 2
        assert text.index("서울특별시") < text.index("부산광역시")
        assert "Springfield" not in text

    @pytest.mark.asyncio
    async def test_blocks_are_separated_by_blank_lines(self, make_registry):
        registry = make_registry(RecordingHandler(json=[SEOUL, BUSAN]))
        result = await registry.invoke("geocode", {"address": "city", "limit": 2})
        assert "\n\n결과 2:\n" in result.first_text

    @pytest.mark.asyncio
    async def test_empty_result_is_not_an_error(self, make_registry):
        registry = make_registry(RecordingHandler(json=[]))
        result = await registry.invoke("geocode", {"address": "no-such-place-xyz123"})
        assert result.is_error is False
        assert result.first_text == '주소 "no-such-place-xyz123"에 대한 검색 결과가 없습니다.'

    @pytest.mark.asyncio
    async def test_non_list_body_is_no_results(self, make_registry):
        registry = make_registry(RecordingHandler(json={"error": "weird"}))
        result = await registry.invoke("geocode", {"address": "somewhere"})
        assert result.is_error is False
        assert "검색 결과가 없습니다" in result.first_text

    @pytest.mark.asyncio
    async def test_http_error_status(self, make_registry):
        registry = make_registry(RecordingHandler(status_code=503, json={"detail": "busy"}))
        result = await registry.invoke("geocode", {"address": "Seoul"})
        assert result.is_error is True
        assert result.first_text == "API 요청 실패: 503"

    @pytest.mark.asyncio
    async def test_transport_error(self, make_registry):
        handler = RecordingHandler(exc=httpx.ConnectError("connection refused"))
        result = await make_registry(handler).invoke("geocode", {"address": "Seoul"})
        assert result.is_error is True
        assert "API 요청 실패" in result.first_text

    @pytest.mark.asyncio
    async def test_timeout(self, make_registry):
        handler = RecordingHandler(exc=httpx.ReadTimeout("too slow"))
        result = await make_registry(handler).invoke("geocode", {"address": "Seoul"})
        assert result.is_error is True
        assert "시간 초과" in result.first_text
