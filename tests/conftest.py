import asyncio

import pytest
from fastapi.testclient import TestClient

from database import UserDb
from fake_cosmos import FakeCosmosClient
from main import create_app
from models import CosmosSecrets, Settings

# base64 of "not-a-real-cosmos-key"
TEST_TOKEN = "bm90LWEtcmVhbC1jb3Ntb3Mta2V5"


@pytest.fixture
def settings():
    return Settings(
        secrets=CosmosSecrets(token=TEST_TOKEN, account="test-account"),
        endpoint="https://test-account.documents.azure.com:443/",
        database_name="user-test-db",
        collection_name="user-test-collection"
    )


@pytest.fixture
def cosmos_client():
    return FakeCosmosClient()


@pytest.fixture
def user_db(settings, cosmos_client):
    return UserDb(settings, client=cosmos_client)


@pytest.fixture
def ready_db(user_db):
    asyncio.run(user_db.setup())
    return user_db


@pytest.fixture
def api(settings, user_db):
    app = create_app(settings, user_db=user_db)
    with TestClient(app) as client:
        yield client
