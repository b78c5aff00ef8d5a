# models.py
from pydantic import BaseModel, Field, SecretStr
from typing import Any, Dict

from utility import (
    COLLECTION_NAME,
    DATABASE_NAME,
    PARTITION_KEY_VALUE,
    get_id
)

class User(BaseModel):
    """
    The document stored in Cosmos DB. "id" and "partition_key" are the fields the
    store itself needs; Cosmos system properties (_rid, _etag, ...) are dropped on read.
    """
    id: str = Field(min_length=1)
    partition_key: int = PARTITION_KEY_VALUE
    email: str
    name: str

    @classmethod
    def from_partial(cls, partial: "PartialUser") -> "User":
        return cls(
            id=get_id(),
            partition_key=PARTITION_KEY_VALUE,
            email=partial.email,
            name=partial.name
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()

class PartialUser(BaseModel):
    """The fields a client may supply when creating a user"""
    email: str
    name: str

class CosmosSecrets(BaseModel):
    token: SecretStr
    account: str

class Settings(BaseModel):
    secrets: CosmosSecrets
    endpoint: str
    host: str = "0.0.0.0"
    port: int = 8080
    database_name: str = DATABASE_NAME
    collection_name: str = COLLECTION_NAME
