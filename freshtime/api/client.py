"""
HttpClient: authenticated access to the FreshBooks API.
"""
import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from ..errors import ApiError, AuthExpiredError, DecodeError, FreshtimeError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.freshbooks.com"
PAGE_SIZE = 100

def api_base_url() -> str:
    """API base URL, overridable through FRESHBOOKS_API_URL."""
    return os.getenv("FRESHBOOKS_API_URL") or DEFAULT_BASE_URL


class Page:
    """Items and page count extracted from one listing response."""

    def __init__(self, items: List[Any], pages: int = 1):
        self.items = items
        self.pages = pages


def _page_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 1
    try:
        return int(value)
    except (TypeError, ValueError):
        return 1

def _items(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []

def flat_page(data: Dict[str, Any], key: str) -> Optional[Page]:
    """Time tracking shape: ``{key: [...], meta: {pages: N}}``."""
    if key not in data:
        return None
    meta = data.get("meta")
    pages = meta.get("pages") if isinstance(meta, dict) else None
    return Page(_items(data[key]), _page_count(pages))

def nested_page(data: Dict[str, Any], key: str) -> Optional[Page]:
    """Accounting shape: ``{response: {result: {key: [...], pages: N}}}``."""
    response = data.get("response")
    result = response.get("result") if isinstance(response, dict) else None
    if not isinstance(result, dict) or key not in result:
        return None
    return Page(_items(result[key]), _page_count(result.get("pages")))

# First match wins
PAGE_SHAPES: Sequence[Callable[[Dict[str, Any], str], Optional[Page]]] = (flat_page, nested_page)

def extract_page(data: Any, key: str) -> Page:
    """Extract the items and page count from a listing response.

    Args:
        data: Decoded response body
        key: Name of the array holding the results

    Returns:
        Page; a response without the key yields no items and one page
    """
    if isinstance(data, dict):
        for shape in PAGE_SHAPES:
            page = shape(data, key)
            if page is not None:
                return page
    return Page([], 1)


class TokenProvider:
    """Holds the access token and optionally knows how to refresh it.

    Args:
        token: Current access token
        on_refresh: Callable returning a new access token (optional)
    """

    def __init__(self, token: str, on_refresh: Optional[Callable[[], str]] = None):
        self.token = token
        self._on_refresh = on_refresh

    @property
    def can_refresh(self) -> bool:
        return self._on_refresh is not None

    def refresh(self) -> str:
        """Obtain, store and return a new access token."""
        if self._on_refresh is None:
            raise AuthExpiredError()
        self.token = self._on_refresh()
        return self.token


class HttpClient:
    """A client for the FreshBooks REST API."""

    def __init__(self, token_provider: TokenProvider, base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """Initialize the HttpClient.

        Args:
            token_provider: Source of the bearer token
            base_url: API base URL (optional)
            session: requests session to send through (optional)
            timeout: Request timeout in seconds (optional)
        """
        self.token_provider = token_provider
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _send(self, method: str, path: str, params: Optional[dict], body: Any) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self.token_provider.token}",
            "Content-Type": "application/json",
        }
        data = json.dumps(body) if body is not None else None
        logger.debug("%s %s params=%s", method, path, params)
        try:
            return self.session.request(
                method, f"{self.base_url}{path}",
                headers=headers, params=params, data=data, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(0, "Network Error", str(e)) from e

    def request(self, method: str, path: str, params: Optional[dict] = None, body: Any = None) -> Any:
        """Make an authenticated request.

        A 401 triggers one token refresh and one retry of the same request.

        Args:
            method: HTTP method
            path: API path starting with a slash
            params: Query parameters (optional)
            body: JSON body (optional)

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            AuthExpiredError: If the request is still unauthorized
            ApiError: For any other non-2xx response
            DecodeError: If the body is not valid JSON
        """
        refreshed = False
        while True:
            resp = self._send(method, path, params, body)
            if resp.status_code != 401:
                break
            if refreshed:
                raise AuthExpiredError()
            if not self.token_provider.can_refresh:
                raise AuthExpiredError(resp.text)
            refreshed = True
            logger.info("Access token rejected, refreshing")
            try:
                self.token_provider.refresh()
            except FreshtimeError as e:
                logger.warning("Token refresh failed: %s", e)
                raise AuthExpiredError() from e
            logger.info("Retrying %s %s with refreshed token", method, path)

        if not 200 <= resp.status_code < 300:
            raise ApiError(resp.status_code, resp.reason or "", resp.text)

        if not resp.text.strip():
            return None
        try:
            return json.loads(resp.text)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {method} {path}: {e}") from e

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any) -> Any:
        return self.request("POST", path, body=body)

    def put(self, path: str, body: Any) -> Any:
        return self.request("PUT", path, body=body)

    def get_paginated(self, path: str, result_key: str, params: Optional[dict] = None) -> List[Any]:
        """Fetch every page of a listing endpoint.

        Pages are fetched in order; the page count reported by each response
        decides whether another page follows.

        Args:
            path: API path
            result_key: Name of the array holding the results
            params: Extra query parameters (optional)

        Returns:
            Raw records from all pages, in order
        """
        all_results: List[Any] = []
        page = 1
        total_pages = 1
        while page <= total_pages:
            paged_params = dict(params) if params else {}
            paged_params["page"] = str(page)
            paged_params["per_page"] = str(PAGE_SIZE)
            data = self.get(path, paged_params)

            result = extract_page(data, result_key)
            all_results.extend(result.items)
            if result.pages > 0:
                total_pages = result.pages
            page += 1
        return all_results
