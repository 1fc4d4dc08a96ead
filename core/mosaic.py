"""
Mosaic REST API client
"""

from typing import Any

import httpx
from sqlmodel import SQLModel

from core.config import get_settings
from core.logger import logger


class ApiResponse(SQLModel):
    """Status code and decoded body of a Mosaic API call"""

    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class MosaicAPIError(Exception):
    """Raised when the Mosaic API answers with a non-2xx status"""

    def __init__(self, method: str, url: str, response: ApiResponse):
        self.method = method
        self.url = url
        self.status = response.status
        self.body = response.body
        super().__init__(f"{method} {url} failed with status {response.status}: {response.body}")


class MosaicClient:
    """
    Thin blocking client over httpx.

    Every request carries the bearer token. Transport failures surface as
    httpx.HTTPError, non-2xx answers from get()/put() as MosaicAPIError.
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or get_settings().MOSAIC_API_URL).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
        )

    def request(
        self,
        method: str,
        url: str,
        headers: dict | None = None,
        body: Any = None,
    ) -> ApiResponse:
        """
        Issue a request and return its status and body.

        The body is sent as JSON when given. The response body is decoded
        as JSON where possible, otherwise returned as text.
        """
        logger.debug(f"{method} {self.base_url}{url}")
        response = self._client.request(method, url, headers=headers, json=body)
        try:
            payload = response.json()
        except ValueError:
            payload = response.text
        return ApiResponse(status=response.status_code, body=payload)

    def get(self, url: str) -> Any:
        response = self.request("GET", url)
        if not response.ok:
            raise MosaicAPIError("GET", url, response)
        return response.body

    def put(self, url: str, body: dict) -> Any:
        response = self.request(
            "PUT", url, headers={"Content-Type": "application/json"}, body=body
        )
        if not response.ok:
            raise MosaicAPIError("PUT", url, response)
        return response.body

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
