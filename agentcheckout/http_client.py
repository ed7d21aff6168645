"""
HTTP Client for the checkout core
Handles communication with the order, wallet and search services
"""

import logging
import requests
from typing import Dict, Any, Optional

from agentcheckout.errors import RemoteCallError

logger = logging.getLogger("agentcheckout.http")

AUTH_API_KEY = "api-key"
AUTH_BEARER = "bearer"


class HTTPClient:
    """
    HTTP client for one remote service.

    Handles authentication, request formatting, and response parsing. Every
    failure (non-2xx status, undecodable JSON, timeout, connection error) is
    raised as RemoteCallError so callers deal with a single exception type.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        auth_scheme: str = AUTH_API_KEY,
        user_agent: str = "crossmint-checkout/1.0",
        timeout: float = 30
    ):
        """
        Initialize HTTP client with API key authentication.

        Args:
            api_key: Credential sent with every request
            base_url: Base URL of the service (trailing slash is ignored)
            auth_scheme: "api-key" sends an X-API-KEY header, "bearer" an
                Authorization: Bearer header
            user_agent: User-Agent header value
            timeout: Per-request timeout in seconds
        """
        if not api_key:
            raise ValueError("API key is required")

        if auth_scheme not in (AUTH_API_KEY, AUTH_BEARER):
            raise ValueError(f"Unknown auth scheme: {auth_scheme}")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

        # Set default headers
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': user_agent
        })
        if auth_scheme == AUTH_BEARER:
            self.session.headers['Authorization'] = f'Bearer {api_key}'
        else:
            self.session.headers['X-API-KEY'] = api_key

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Make an HTTP request to the service.

        Args:
            method: HTTP method (GET, POST)
            endpoint: Endpoint path (e.g., '/api/2022-06-09/orders')
            data: Request body data (for POST)
            params: Query parameters (for GET)
            headers: Extra headers for this request only

        Returns:
            Decoded JSON response (object or array)

        Raises:
            RemoteCallError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.info("Request %s %s", method, endpoint)

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error("Request to %s timed out", url)
            raise RemoteCallError(f"Request to {url} timed out")
        except requests.exceptions.ConnectionError:
            logger.error("Failed to connect to %s", url)
            raise RemoteCallError(f"Failed to connect to {url}")
        except requests.exceptions.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise RemoteCallError(f"Request to {url} failed: {e}")

        try:
            body = response.json()
        except ValueError:
            body = None

        logger.info("Response %s %s -> %s", method, endpoint, response.status_code)

        if not response.ok:
            # Try to extract error message from response
            if isinstance(body, dict):
                message = body.get('message') or body.get('error') or response.text
            else:
                message = response.text or response.reason
            logger.error("Request %s %s failed: %s %s", method, endpoint, response.status_code, message)
            raise RemoteCallError(
                f"HTTP error! status: {response.status_code}, message: {message}",
                status_code=response.status_code,
                body=body
            )

        if body is None:
            raise RemoteCallError(
                f"Invalid JSON response from {endpoint}",
                status_code=response.status_code
            )

        return body

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """Make a GET request."""
        return self._make_request('GET', endpoint, params=params, headers=headers)

    def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """Make a POST request."""
        return self._make_request('POST', endpoint, data=data, headers=headers)

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close session."""
        self.close()
