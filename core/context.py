# =============================================================================
# core/context.py  -  Shared, injectable dependencies for the handlers
# =============================================================================
#
# Handlers are stateless.  The only things they share are:
#   - the Settings
#   - ONE httpx.AsyncClient for outbound GETs (geocode, get-weather)
#   - ONE Hugging Face AsyncInferenceClient (generate-image)
#
# Both clients are created lazily on first use and can be passed in instead
# (tests hand in an httpx client backed by MockTransport and a stub image
# client).  No locking: httpx's connection pool handles overlapping calls.
# =============================================================================

import logging
from typing import Any, Callable, Optional

import httpx

from core.config import Settings
from core.errors import MissingCredentialError, UpstreamRequestError

logger = logging.getLogger(__name__)

IMAGE_PROVIDER = "hf-inference"


def default_image_client_factory(settings: Settings) -> Any:
    """Create the Hugging Face inference client for ``settings.hf_token``."""
    from huggingface_hub import AsyncInferenceClient

    return AsyncInferenceClient(
        provider=IMAGE_PROVIDER,
        api_key=settings.hf_token,
        timeout=max(settings.http_timeout, 60.0),
    )


class ToolContext:
    """Per-server bundle of settings and lazily constructed API clients."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        image_client: Any = None,
        image_client_factory: Callable[[Settings], Any] = default_image_client_factory,
    ):
        self.settings = settings or Settings()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._image_client = image_client
        self._owns_image_client = image_client is None
        self._image_client_factory = image_client_factory

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    @property
    def http(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.http_timeout,
                follow_redirects=True,
            )
        return self._http_client

    async def get(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        """GET ``url``; transport failures and timeouts become UpstreamRequestError.

        The status code is NOT checked here: each handler decides what a
        non-2xx response means for its API.
        """
        try:
            return await self.http.get(url, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("Timeout calling %s: %s", url, exc)
            raise UpstreamRequestError(
                f"API 요청 실패: 시간 초과 ({self.settings.http_timeout:g}초)"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error calling %s: %s", url, exc)
            raise UpstreamRequestError(f"API 요청 실패: {exc}") from exc

    # -------------------------------------------------------------------------
    # Image generation
    # -------------------------------------------------------------------------
    def image_client(self) -> Any:
        """Return the shared inference client, creating it on first use.

        Raises:
            MissingCredentialError: No injected client and no HF token.
        """
        if self._image_client is None:
            if not self.settings.hf_token:
                raise MissingCredentialError("HF_TOKEN")
            self._image_client = self._image_client_factory(self.settings)
        return self._image_client

    async def aclose(self) -> None:
        """Close the clients this context created; injected clients stay open."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        if self._image_client is not None and self._owns_image_client:
            await self._image_client.close()
            self._image_client = None
