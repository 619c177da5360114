"""
OpenPecha API HTTP Client
Client for forwarding gateway requests to the upstream OpenPecha REST API

Connection pooling follows the shared-client pattern:
- Single shared AsyncClient initialized at app startup
- Limits and pool timeout taken from settings
- Per-request client fallback when the shared client is not started
"""

import httpx
import logging
from typing import Optional, Dict, Any

from app.config import Settings, settings as default_settings
from shared.utils.logger import performance_timer

logger = logging.getLogger(__name__)


class OpenPechaAPIError(Exception):
    """
    Upstream call failure.

    status_code is the upstream HTTP status, or None when the upstream
    could not be reached at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def _response_body(response: httpx.Response) -> Any:
    """Decode an upstream error body, JSON when possible"""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class OpenPechaClient:
    """
    HTTP client for the OpenPecha API.

    Lifecycle:
        - Call start() during app startup (FastAPI lifespan)
        - Call stop() during app shutdown
        - If not initialized, falls back to per-request client
    """

    def __init__(self, config: Settings = None, transport: httpx.AsyncBaseTransport = None):
        self.config = config or default_settings
        self.base_url = self.config.openpecha_endpoint.rstrip('/')
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.config.upstream_connect_timeout,
            read=self.config.upstream_read_timeout,
            write=self.config.upstream_write_timeout,
            pool=self.config.upstream_pool_timeout
        )

    async def start(self):
        """
        Initialize the shared HTTP client.
        Call this during FastAPI app startup via lifespan.
        """
        if self._client is not None:
            logger.warning("OpenPechaClient already started")
            return

        limits = httpx.Limits(
            max_connections=self.config.upstream_max_connections,
            max_keepalive_connections=self.config.upstream_max_keepalive
        )

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            limits=limits,
            timeout=self._timeout(),
            transport=self._transport
        )

        logger.info(
            f"OpenPechaClient started: base_url={self.base_url}, "
            f"max_connections={self.config.upstream_max_connections}"
        )

    async def stop(self):
        """
        Close the HTTP client and release resources.
        Call this during FastAPI app shutdown via lifespan.
        """
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("OpenPechaClient stopped")

    @property
    def started(self) -> bool:
        return self._client is not None

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        authorization: Optional[str] = None
    ) -> Any:
        """Make HTTP request to the OpenPecha API"""
        headers = {"accept": "application/json"}
        if json is not None:
            headers["content-type"] = "application/json"
        if authorization:
            headers["authorization"] = authorization

        kwargs: Dict[str, Any] = {"headers": headers}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json

        try:
            with performance_timer(f"{method} {endpoint}", "openpecha"):
                if self._client:
                    response = await self._client.request(method, endpoint, **kwargs)
                else:
                    logger.warning("OpenPechaClient not initialized, using per-request client")
                    async with httpx.AsyncClient(timeout=self._timeout(), transport=self._transport) as client:
                        response = await client.request(method, f"{self.base_url}{endpoint}", **kwargs)

                response.raise_for_status()

            if response.status_code == 204 or not response.content:
                return None

            return response.json()

        except httpx.PoolTimeout:
            logger.error(f"Connection pool exhausted calling {endpoint}")
            raise OpenPechaAPIError("Service temporarily unavailable - connection pool exhausted")
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling OpenPecha API {method} {endpoint}: {e}")
            raise OpenPechaAPIError(f"Timed out waiting for OpenPecha API: {e}")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error calling OpenPecha API {method} {endpoint}: {status} - {e.response.text}")
            raise OpenPechaAPIError(
                f"Request failed with status code {status}",
                status_code=status,
                body=_response_body(e.response)
            )
        except httpx.RequestError as e:
            logger.error(f"Request error calling OpenPecha API {method} {endpoint}: {e}")
            raise OpenPechaAPIError(f"Failed to connect to OpenPecha API: {e}")
        except ValueError as e:
            logger.error(f"Invalid JSON from OpenPecha API {method} {endpoint}: {e}")
            raise OpenPechaAPIError(f"Invalid response from OpenPecha API: {e}")

    # Texts

    async def list_texts(self, params: Dict[str, Any], authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", "/texts", params=params, authorization=authorization)

    async def get_text(self, text_id: str, authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", f"/texts/{text_id}", authorization=authorization)

    async def create_text(self, text_data: Dict[str, Any], authorization: Optional[str] = None) -> Any:
        logger.info(f"Creating text of type {text_data.get('type')} in OpenPecha API")
        return await self._make_request("POST", "/texts", json=text_data, authorization=authorization)

    # Instances

    async def list_text_instances(self, text_id: str, authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", f"/texts/{text_id}/instances", authorization=authorization)

    async def create_text_instance(
        self,
        text_id: str,
        instance_data: Dict[str, Any],
        authorization: Optional[str] = None
    ) -> Any:
        logger.info(f"Creating instance for text {text_id} in OpenPecha API")
        return await self._make_request(
            "POST", f"/texts/{text_id}/instances", json=instance_data, authorization=authorization
        )

    async def get_instance(self, instance_id: str, authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", f"/instances/{instance_id}", authorization=authorization)

    # Persons

    async def list_persons(self, params: Dict[str, Any], authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", "/persons", params=params, authorization=authorization)

    async def get_person(self, person_id: str, authorization: Optional[str] = None) -> Any:
        return await self._make_request("GET", f"/persons/{person_id}", authorization=authorization)

    async def create_person(self, person_data: Dict[str, Any], authorization: Optional[str] = None) -> Any:
        logger.info("Creating person in OpenPecha API")
        return await self._make_request("POST", "/persons", json=person_data, authorization=authorization)

    async def health_check(self) -> str:
        """Check if the OpenPecha API answers at all"""
        try:
            await self._make_request("GET", "/texts", params={"limit": 1, "offset": 0})
            return "healthy"
        except OpenPechaAPIError as e:
            if e.status_code is not None:
                return "unhealthy"
            return "unreachable"


# Global instance of the client
openpecha_client = OpenPechaClient()


def get_openpecha_client() -> OpenPechaClient:
    """FastAPI dependency returning the shared OpenPecha client"""
    return openpecha_client
