# services/http.py
import os
from typing import Any, Dict

import requests
from tenacity import (
    RetryError,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from core.errors import RemoteServiceFailure
from core.logger import get_logger

logger = get_logger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3333").rstrip("/")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))
API_MAX_ATTEMPTS = int(os.getenv("API_MAX_ATTEMPTS", "3"))
USER_AGENT = os.getenv("API_USER_AGENT", "cart-manager/0.1")

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})


def _is_transient(exc: BaseException) -> bool:
    """Connection problems, timeouts and 5xx are worth another attempt; 4xx is not."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is not None and response.status_code >= 500
    return False


@retry(
    wait=wait_exponential_jitter(initial=0.5, max=5),
    stop=stop_after_attempt(API_MAX_ATTEMPTS),
    retry=retry_if_exception(_is_transient),
)
def _fetch(url: str) -> requests.Response:
    r = SESSION.get(url, timeout=API_TIMEOUT)
    r.raise_for_status()
    return r


def get_json(service: str, path: str, product_id: int) -> Dict[str, Any]:
    """
    GET {API_BASE_URL}{path} and return the decoded JSON object.
    Every failure is reported as RemoteServiceFailure.
    """
    url = f"{API_BASE_URL}{path}"
    logger.debug("%s request: GET %s", service, url)

    try:
        response = _fetch(url)
    except RetryError as e:
        logger.error("%s request to %s failed after retries: %s", service, url, e)
        raise RemoteServiceFailure(service, product_id, "retries exhausted") from e
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        logger.warning("%s request to %s returned HTTP %s", service, url, status)
        raise RemoteServiceFailure(service, product_id, f"HTTP {status}") from e
    except requests.RequestException as e:
        logger.error("%s request to %s failed: %s", service, url, e)
        raise RemoteServiceFailure(service, product_id, str(e)) from e

    try:
        data = response.json()
    except ValueError as e:
        raise RemoteServiceFailure(service, product_id, "response is not JSON") from e

    if not isinstance(data, dict):
        raise RemoteServiceFailure(service, product_id, "response is not an object")
    return data
