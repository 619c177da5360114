"""
Gateway HTTP Client
Client-side calls to the Pecha gateway, parsed into shared schemas
"""

import httpx
import logging
from typing import Optional, Dict, Any, List, Type, TypeVar
from pydantic import BaseModel, ValidationError

from frontend.config import ClientSettings, get_client_settings
from shared.schemas import PersonSchema, TextInstanceSchema, TextSchema

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GatewayRequestError(Exception):
    """Failed call to the gateway, carrying the most specific message available"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def error_message(response: httpx.Response) -> str:
    """Pick a readable message out of an error response"""
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return f"{fallback} - {text}" if text else fallback

    if isinstance(payload, dict):
        for key in ("details", "detail", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict):
                nested = value.get("detail") or value.get("message")
                if isinstance(nested, str) and nested:
                    return nested
    return fallback


def unwrap_results(data: Any) -> List[Any]:
    """List endpoints answer {results: [...]} or a bare array"""
    if isinstance(data, dict):
        results = data.get("results")
        return results if isinstance(results, list) else []
    return data if isinstance(data, list) else []


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop empty query parameters"""
    return {k: v for k, v in (params or {}).items() if v is not None and v != ""}


def parse_record(model: Type[ModelT], data: Any) -> ModelT:
    """Parse a single resource, reporting malformed data as a request error"""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Malformed {model.__name__} from gateway: {e}")
        raise GatewayRequestError(
            f"Invalid {model.__name__} in server response ({e.error_count()} error(s))",
            payload=data
        )


def parse_records(model: Type[ModelT], data: Any) -> List[ModelT]:
    """Parse a list response, skipping records that do not fit the model"""
    records = []
    for item in unwrap_results(data):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            record_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(f"Skipping malformed {model.__name__} {record_id}: {e.error_count()} error(s)")
    return records


class GatewayAPI:
    """HTTP client for the gateway used by the client core"""

    def __init__(self, config: ClientSettings = None, transport: httpx.AsyncBaseTransport = None):
        self.config = config or get_client_settings()
        self.base_url = self.config.server_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self):
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.config.request_timeout,
                transport=self._transport
            )

    async def stop(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        try:
            if self._client:
                response = await self._client.request(method, endpoint, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.config.request_timeout,
                                             transport=self._transport) as client:
                    response = await client.request(method, f"{self.base_url}{endpoint}", **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request error calling gateway {method} {endpoint}: {e}")
            raise GatewayRequestError(f"Failed to reach server: {e}")

        if response.is_error:
            message = error_message(response)
            logger.error(f"Gateway call failed {method} {endpoint}: {response.status_code} - {message}")
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise GatewayRequestError(message, status_code=response.status_code, payload=payload)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Texts

    async def fetch_texts(self, params: Optional[Dict[str, Any]] = None) -> List[TextSchema]:
        data = await self._request("GET", "/text", params=clean_params(params))
        return parse_records(TextSchema, data)

    async def fetch_text(self, text_id: str) -> TextSchema:
        return parse_record(TextSchema, await self._request("GET", f"/text/{text_id}"))

    async def create_text(self, text_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/text", json=text_data)

    async def fetch_text_instances(self, text_id: str) -> List[TextInstanceSchema]:
        data = await self._request("GET", f"/text/{text_id}/instances")
        return parse_records(TextInstanceSchema, data)

    async def fetch_instance(self, instance_id: str) -> TextInstanceSchema:
        return parse_record(TextInstanceSchema, await self._request("GET", f"/instances/{instance_id}"))

    async def create_text_instance(self, text_id: str, instance_data: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"Creating instance for text {text_id}")
        return await self._request("POST", f"/text/{text_id}/instances", json=instance_data)

    # Persons

    async def fetch_persons(self, params: Optional[Dict[str, Any]] = None) -> List[PersonSchema]:
        data = await self._request("GET", "/person", params=clean_params(params))
        return parse_records(PersonSchema, data)

    async def fetch_person(self, person_id: str) -> PersonSchema:
        return parse_record(PersonSchema, await self._request("GET", f"/person/{person_id}"))

    async def create_person(self, person_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/person", json=person_data)
