"""
Bearer token tests
"""

import pytest

from nursery_server.core.exceptions import AuthenticationError
from nursery_server.core.security import ADMIN, SecurityManager


@pytest.fixture
def manager():
    return SecurityManager(secret="test-secret", algorithm="HS256", expire_hours=1)


def test_token_carries_actor_and_role_only(manager):
    token = manager.create_jwt_token(7, ADMIN)

    payload = manager.decode_jwt_token(token)

    assert set(payload) == {"sub", "role", "iat", "exp"}
    assert manager.get_actor_from_token(token).id == 7
    assert manager.get_actor_from_token(token).role == ADMIN


def test_token_signed_with_another_secret(manager):
    token = SecurityManager(secret="other-secret", algorithm="HS256", expire_hours=1).create_jwt_token(7, ADMIN)

    with pytest.raises(AuthenticationError):
        manager.get_actor_from_token(token)
