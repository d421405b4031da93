"""
Pytest fixtures for thread_comments tests.

Users come without capabilities; tests set ``can_read``, ``can_edit`` and
``is_admin`` flags on them as needed.
"""
import pytest
from rest_framework.test import APIClient

from .factories import ArticleFactory, CommentFactory, ThreadFactory, UserFactory


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Automatically enable database access for all tests.
    """
    pass


@pytest.fixture
def api_client():
    """
    Return an unauthenticated DRF API client.
    """
    return APIClient()


@pytest.fixture
def user():
    """
    Return a user who can read threads.
    """
    user = UserFactory()
    user.can_read = True
    return user


@pytest.fixture
def other_user():
    other = UserFactory()
    other.can_read = True
    return other


@pytest.fixture
def moderator():
    """
    Return a user who can read and moderate threads.
    """
    moderator = UserFactory()
    moderator.can_read = True
    moderator.can_edit = True
    return moderator


@pytest.fixture
def authenticated_client(user):
    """
    Return an API client authenticated as ``user``.
    """
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture
def moderator_client(moderator):
    client = APIClient()
    client.force_authenticate(user=moderator)
    return client


@pytest.fixture
def article():
    return ArticleFactory()


@pytest.fixture
def thread(article):
    return ThreadFactory(content_object=article)


@pytest.fixture
def comment(thread, user):
    """
    Return a comment by ``user`` in ``thread``.
    """
    return CommentFactory(thread=thread, creator=user, body='Something')
