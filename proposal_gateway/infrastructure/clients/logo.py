"""HTTP client that inlines a remote company logo as a data URI"""

import base64
import logging
from dataclasses import replace
import httpx
from proposal_gateway.domain.exceptions import LogoFetchError
from proposal_gateway.domain.models import ProposalData
from proposal_gateway.config import settings
from proposal_gateway.infrastructure.observability.metrics import logo_fetch_failures_counter

logger = logging.getLogger(__name__)

MAX_LOGO_BYTES = 2 * 1024 * 1024


class LogoClient:
    """Client for downloading logos referenced by absolute http(s) URLs"""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or settings.http_timeout_seconds

    @staticmethod
    def is_remote(logo: str | None) -> bool:
        return bool(logo) and logo.startswith(("http://", "https://"))

    async def fetch_data_uri(self, url: str) -> str:
        """
        Download an image and encode it as a data URI.

        Raises:
            LogoFetchError: On timeout, HTTP errors, non-image or oversized responses
        """
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                raise LogoFetchError(f"Logo download timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise LogoFetchError(f"Logo download error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise LogoFetchError(f"Logo download failed: {e}") from e

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            raise LogoFetchError(f"Logo URL did not return an image: {content_type or 'unknown'}")
        if len(response.content) > MAX_LOGO_BYTES:
            raise LogoFetchError("Logo exceeds maximum size")

        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    async def inline_logo(self, proposal: ProposalData) -> ProposalData:
        """
        Return a copy of `proposal` whose remote logo is embedded.

        Relative paths and data URIs are left as they are. When the download
        fails the original reference is kept so the document still renders.
        """
        logo = proposal.company.logo
        if not self.is_remote(logo):
            return proposal

        try:
            data_uri = await self.fetch_data_uri(logo)
        except LogoFetchError as e:
            logo_fetch_failures_counter.inc()
            logger.warning("Keeping remote logo reference: %s", e)
            return proposal

        return replace(proposal, company=replace(proposal.company, logo=data_uri))
