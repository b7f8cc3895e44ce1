import json
import re
import httpx
from typing import Optional, Dict, Any
from config import settings
import logging

logger = logging.getLogger(__name__)

# The incentive service wraps its JSON in non-JSON noise
JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(body: str) -> Dict[str, Any]:
    """Parse the first {...} span of a response body"""
    match = JSON_OBJECT_PATTERN.search(body)
    if not match:
        raise ValueError("No valid JSON found in response")
    return json.loads(match.group(0))


class RegistryAPI:
    """Client for the pool incentive service and chain REST endpoints"""

    def __init__(self, incentives_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.incentives_url = (incentives_url or settings.incentives_api_url).rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=settings.http_timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
        )

    async def close(self):
        await self.client.aclose()

    # Incentive endpoints
    async def get_pool_incentives(self, pool_id: str) -> Dict[str, Any]:
        """Get incentives of an AMM pool"""
        url = f"{self.incentives_url}/pool/{pool_id}"
        logger.info(f"GET {url}")
        response = await self.client.get(url)
        response.raise_for_status()
        return extract_json_object(response.text)

    # Chain REST endpoints
    async def get_denom_trace(self, rest_address: str, ibc_hash: str) -> Dict[str, Any]:
        """Resolve an IBC denom hash on the given chain"""
        url = f"{rest_address.rstrip('/')}/ibc/apps/transfer/v1/denom_traces/{ibc_hash}"
        logger.info(f"GET {url}")
        response = await self.client.get(url)
        response.raise_for_status()
        return response.json()["denom_trace"]


# Global API client instance
api = RegistryAPI()
