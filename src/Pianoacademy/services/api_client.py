import logging

import requests

from Pianoacademy.data import storage
from Pianoacademy.errors import (
    DEFAULT_ERROR_MESSAGE,
    ServerError,
    TransportError,
)

logger = logging.getLogger(__name__)

_STATUS_LOG = {
    401: "Authentication failed",
    403: "Permission denied",
    404: "Resource not found",
    500: "Server error",
}


def _error_message(response):
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return body["message"], body
    return getattr(response, "reason", None) or DEFAULT_ERROR_MESSAGE, body


class ApiClient:
    """Thin JSON client over ``requests.Session`` for the academy REST API.

    The bearer token is read from local storage before every request.
    Transport failures raise :class:`TransportError`; any non-2xx answer
    raises :class:`ServerError` carrying the status code.
    """

    def __init__(self, config, token_provider=None, session=None):
        self.base_url = config.api_base_url.rstrip("/")
        self.timeout = config.request_timeout
        self.token_provider = token_provider or storage.get_auth_token
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _auth_headers(self):
        try:
            token = self.token_provider()
        except Exception as e:
            logger.error("Failed to get auth token: %s", e)
            return {}
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def request(self, method, path, params=None, json=None):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error("Network Error: %s %s: %s", method, url, e)
            raise TransportError(cause=e)
        except requests.RequestException as e:
            logger.error("Request Error: %s %s: %s", method, url, e)
            raise TransportError(str(e) or DEFAULT_ERROR_MESSAGE, cause=e)

        status = response.status_code
        if not 200 <= status < 300:
            message, body = _error_message(response)
            if status in _STATUS_LOG:
                logger.error("%s (%s %s)", _STATUS_LOG[status], method, path)
            else:
                logger.error("API Error: %s %s", status, body)
            raise ServerError(message, status_code=status, payload=body)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, json=None):
        return self.request("POST", path, json=json)

    def put(self, path, json=None):
        return self.request("PUT", path, json=json)

    def patch(self, path, json=None):
        return self.request("PATCH", path, json=json)

    def delete(self, path):
        return self.request("DELETE", path)
