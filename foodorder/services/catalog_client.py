# foodorder/services/catalog_client.py
import requests
from requests import RequestException
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from foodorder.domain.errors import CatalogError
from foodorder.utils.settings import CATALOG_SERVICE_URL
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(RequestException),
    )


class CatalogClient:
    """Read-only client of the food catalog service."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get(self, url: str) -> requests.Response:
        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code != 404:
            resp.raise_for_status()
        return resp

    def fetch_food(self, item_id: str) -> dict | None:
        """Return ``{"id", "name", "price"}`` or None when the item does not exist."""
        url = f"{self.base_url}/foods/{item_id}"
        logger.info(f"CatalogClient GET {url}")

        try:
            resp = self._get(url)
        except RequestException as e:
            logger.error(f"Catalog unavailable for item {item_id}: {e}")
            raise CatalogError(f"Catalog unavailable: {e}") from e

        if resp.status_code == 404:
            return None
        return resp.json()
