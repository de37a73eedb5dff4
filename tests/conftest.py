import uuid

import pytest
from mongomock_motor import AsyncMongoMockClient

from leave_portal.database import init_db


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client[f"leave_portal_test_{uuid.uuid4().hex}"]
    await init_db(database)
    yield database
