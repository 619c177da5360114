"""
Cached queries and mutations over the gateway API
"""

import logging
from typing import Any, Dict, List, Optional

from frontend.api import GatewayAPI
from frontend.query_cache import QueryCache
from shared.schemas import PersonSchema, TextInstanceSchema, TextSchema

logger = logging.getLogger(__name__)


class TextQueries:
    """Text, text instance and instance reads plus the text mutations"""

    def __init__(self, api: GatewayAPI, cache: QueryCache):
        self.api = api
        self.cache = cache

    async def texts(self, params: Optional[Dict[str, Any]] = None) -> List[TextSchema]:
        return await self.cache.fetch_query(("texts", params), lambda: self.api.fetch_texts(params))

    async def text(self, text_id: str) -> TextSchema:
        return await self.cache.fetch_query(("text", text_id), lambda: self.api.fetch_text(text_id))

    async def text_instances(self, text_id: str) -> List[TextInstanceSchema]:
        return await self.cache.fetch_query(
            ("textInstance", text_id), lambda: self.api.fetch_text_instances(text_id)
        )

    async def instance(self, instance_id: str) -> TextInstanceSchema:
        return await self.cache.fetch_query(
            ("instance", instance_id), lambda: self.api.fetch_instance(instance_id)
        )

    async def create_text(self, text_data: Dict[str, Any]) -> Dict[str, Any]:
        created = await self.api.create_text(text_data)
        self.cache.invalidate(("texts",))
        return created

    async def create_text_instance(self, text_id: str, instance_data: Dict[str, Any]) -> Dict[str, Any]:
        created = await self.api.create_text_instance(text_id, instance_data)
        self.cache.invalidate(("textInstance", text_id))
        return created


class PersonQueries:
    """Person reads and creation"""

    def __init__(self, api: GatewayAPI, cache: QueryCache):
        self.api = api
        self.cache = cache

    async def persons(self, params: Optional[Dict[str, Any]] = None) -> List[PersonSchema]:
        return await self.cache.fetch_query(("persons", params), lambda: self.api.fetch_persons(params))

    async def person(self, person_id: str) -> PersonSchema:
        return await self.cache.fetch_query(("person", person_id), lambda: self.api.fetch_person(person_id))

    async def create_person(self, person_data: Dict[str, Any]) -> Dict[str, Any]:
        created = await self.api.create_person(person_data)
        self.cache.invalidate(("persons",))
        logger.info(f"Created person {created.get('id') if isinstance(created, dict) else created}")
        return created
