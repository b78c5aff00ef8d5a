# database.py
import asyncio
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Tuple

from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, PartitionKey, exceptions
from pydantic import ValidationError

from config import COSMOS_AUTH_TOKEN_ENV
from errors import (
    ConfigurationError,
    DeserializationError,
    NotFound,
    QueryError,
    WriteError
)
from models import Settings, User
from utility import PARTITION_KEY_PATH, PARTITION_KEY_VALUE

logger = logging.getLogger("UserDb")

LIST_QUERY = "SELECT * FROM c WHERE c.partition_key = @partition_key"
FIND_QUERY = "SELECT * FROM c WHERE c.id = @id"


def public_client(settings: Settings) -> CosmosClient:
    """
    Build a CosmosClient from the account key. The key is the base64 "PRIMARY KEY" or
    "SECONDARY KEY" shown under Keys for the account in the Azure portal.
    """
    token = settings.secrets.token.get_secret_value()
    try:
        base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError):
        raise ConfigurationError(
            f"{COSMOS_AUTH_TOKEN_ENV} is not a base64 encoded account key",
            variable=COSMOS_AUTH_TOKEN_ENV
        )
    return CosmosClient(settings.endpoint, credential=token)


class UserDb:
    """
    Owns the connection to Cosmos DB, the users database and the users collection.

    The SDK client is synchronous, so every call runs in a worker thread and the
    event loop stays free while the round trip is in flight.
    """
    def __init__(self, settings: Settings, client=None):
        self.database_name = settings.database_name
        self.collection_name = settings.collection_name
        self.client = client if client is not None else public_client(settings)
        self.database = self.client.get_database_client(self.database_name)
        self.container = self.database.get_container_client(self.collection_name)
        logger.info(f"Initialized UserDb for {self.database_name}/{self.collection_name}")

    async def setup(self) -> None:
        """Drop and recreate the database and the users collection. This DELETES all data."""
        try:
            await asyncio.to_thread(self._setup)
        except AzureError as e:
            logger.error(f"Failed to set up {self.database_name}: {e}")
            raise WriteError(f"Failed to set up database {self.database_name}: {e}")

    def _setup(self):
        logger.info("Deleting existing database")
        try:
            self.client.delete_database(self.database_name)
            logger.info(f"\tDeleted {self.database_name} database")
        except exceptions.CosmosResourceNotFoundError:
            logger.info(f"\tDatabase {self.database_name} not found")

        logger.info("Creating new database")
        self.database = self.client.create_database(self.database_name)
        logger.info("\tCreated database")

        # The partition key path must name a field of User
        logger.info("Creating collections")
        self.container = self.database.create_container(
            id=self.collection_name,
            partition_key=PartitionKey(path=PARTITION_KEY_PATH)
        )
        logger.info(f"\tCreated {self.collection_name} collection")

    async def list(self) -> List[User]:
        """Return *all* users in the collection. Not paginated."""
        try:
            documents = await asyncio.to_thread(
                self._query, LIST_QUERY, self._partition_parameters()
            )
        except AzureError as e:
            logger.error(f"Failed to list users: {e}")
            raise QueryError(f"Failed to query {self.collection_name}: {e}")
        return self._to_users(documents)

    async def list_page(self, page_size: int, continuation: Optional[str] = None) -> Tuple[List[User], Optional[str]]:
        """Return one page of users and the token for the next page, None on the last page"""
        try:
            documents, token = await asyncio.to_thread(
                self._query_page, page_size, continuation
            )
        except AzureError as e:
            logger.error(f"Failed to list page of users: {e}")
            raise QueryError(f"Failed to query {self.collection_name}: {e}")
        return self._to_users(documents), token

    async def find(self, user_id: str) -> User:
        try:
            documents = await asyncio.to_thread(
                self._query, FIND_QUERY, [{"name": "@id", "value": user_id}]
            )
        except AzureError as e:
            logger.error(f"Failed to find user {user_id}: {e}")
            raise QueryError(f"Failed to query {self.collection_name}: {e}")

        users = self._to_users(documents)
        if not users:
            raise NotFound(f"User not found: {user_id}")
        return users[0]

    async def create(self, user: User) -> User:
        """Insert a fully formed user. The store rejects id collisions."""
        try:
            await asyncio.to_thread(self.container.create_item, body=user.to_document())
        except AzureError as e:
            logger.error(f"Failed to create user {user.id}: {e}")
            raise WriteError(f"Failed to create user {user.id}: {e}")
        logger.info(f"Created user {user.id}")
        return user

    async def delete(self, user_id: str) -> None:
        try:
            await asyncio.to_thread(
                self.container.delete_item,
                item=user_id,
                partition_key=PARTITION_KEY_VALUE
            )
        except exceptions.CosmosResourceNotFoundError:
            raise NotFound(f"User not found: {user_id}")
        except AzureError as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise WriteError(f"Failed to delete user {user_id}: {e}")
        logger.info(f"Deleted user {user_id}")

    def _partition_parameters(self) -> List[Dict[str, Any]]:
        return [{"name": "@partition_key", "value": PARTITION_KEY_VALUE}]

    def _query(self, query: str, parameters: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        logger.debug(f"Query: {query} parameters: {parameters}")
        return list(self.container.query_items(
            query=query,
            parameters=parameters,
            enable_cross_partition_query=True
        ))

    def _query_page(self, page_size, continuation):
        pager = self.container.query_items(
            query=LIST_QUERY,
            parameters=self._partition_parameters(),
            enable_cross_partition_query=True,
            max_item_count=page_size
        ).by_page(continuation)
        documents = list(next(pager, []))
        return documents, pager.continuation_token

    def _to_users(self, documents: List[Dict[str, Any]]) -> List[User]:
        users = []
        for document in documents:
            try:
                users.append(User.from_document(document))
            except ValidationError as e:
                logger.error(f"Document {document.get('id')} is not a User: {e}")
                raise DeserializationError(f"Document {document.get('id')} is not a User: {e}")
        return users
