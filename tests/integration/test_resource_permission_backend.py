from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser, Permission, User
from django.contrib.contenttypes.models import ContentType

from resource_permissions.engine import get_resource_permissions
from tests.articles.models import Article

pytestmark = pytest.mark.django_db


def _edit_permission() -> Permission:
    return Permission.objects.get_or_create(
        codename="edit_article_body",
        content_type=ContentType.objects.get_for_model(Article),
        defaults={"name": "Can edit article body"},
    )[0]


def test_has_perm_with_object_uses_resource_grants() -> None:
    _edit_permission()
    user = User.objects.create_user(username="writer", password="pw")
    article = Article.objects.create(title="One")
    other = Article.objects.create(title="Two")

    get_resource_permissions().grant_permission(user, article, "articles.edit_article_body")

    assert user.has_perm("articles.edit_article_body", article) is True
    assert user.has_perm("articles.edit_article_body", other) is False
    assert user.has_perm("articles.edit_article_body") is False


def test_global_or_resource_is_the_callers_choice() -> None:
    permission = _edit_permission()
    user = User.objects.create_user(username="chief", password="pw")
    user.user_permissions.add(permission)
    user = User.objects.get(pk=user.pk)
    article = Article.objects.create(title="One")

    assert user.has_perm("articles.edit_article_body", article) is False
    assert (
        user.has_perm("articles.edit_article_body")
        or user.has_perm("articles.edit_article_body", article)
    ) is True


def test_inactive_and_anonymous_users_are_denied() -> None:
    _edit_permission()
    user = User.objects.create_user(username="gone", password="pw")
    article = Article.objects.create(title="One")
    get_resource_permissions().grant_permission(user, article, "articles.edit_article_body")

    user.is_active = False
    assert user.has_perm("articles.edit_article_body", article) is False
    assert AnonymousUser().has_perm("articles.edit_article_body", article) is False
