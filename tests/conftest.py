"""
Shared pytest fixtures.

Records are created through the ORM directly; HTTP-level tests go through
Django's test client with a token in the Authorization header.
"""

import pytest

from publishing.identity import IdentityRef, issue_token
from publishing.models import Article, Comment, User
from publishing.stores import Store


@pytest.fixture(autouse=True)
def _fast_hashing(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def store(db):
    return Store("default")


@pytest.fixture
def make_user(db):
    def factory(username, password="correct-horse-9", **fields):
        fields.setdefault("name", username.title())
        user = User(username=username, **fields)
        user.set_password(password)
        user.save()
        return user
    return factory


@pytest.fixture
def make_article(db):
    def factory(author, title="Untitled", tags=None, **fields):
        fields.setdefault("description", f"About {title}")
        fields.setdefault("body", f"Body of {title}")
        return Article.objects.create(author=author, title=title, tag_list=tags or [], **fields)
    return factory


@pytest.fixture
def make_comment(db):
    def factory(article, author, body="Nice read"):
        return Comment.objects.create(article=article, author=author, body=body)
    return factory


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def identity_of():
    def factory(user):
        return IdentityRef(user.pk)
    return factory


@pytest.fixture
def auth():
    """Authorization header kwargs for the test client."""
    def factory(user):
        return {"HTTP_AUTHORIZATION": f"Token {issue_token(user)}"}
    return factory
