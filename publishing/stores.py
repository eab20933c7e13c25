"""
Identity and content store.

``Store`` is the only component that talks to the database. It is bound to
one database alias, created once when the app starts, and handed to every
service at construction. Toggle and guard logic work on the records it
returns and hand them back to ``save``.
"""

import logging

from django.apps import apps
from django.db import connections, transaction

from .models import Article, Comment, User

logger = logging.getLogger(__name__)


KINDS = {
    "user": User,
    "article": Article,
    "comment": Comment,
}

# Natural keys accepted by find_by_unique_key
UNIQUE_KEYS = {
    "user": "username",
}


class Store:

    def __init__(self, alias="default"):
        self.alias = alias

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        return f"<Store {self.alias}>"

    def close(self):
        connections[self.alias].close()

    def atomic(self):
        return transaction.atomic(using=self.alias)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def objects(self, kind):
        try:
            model = KINDS[kind]
        except KeyError:
            raise ValueError(f"Unknown record kind: {kind}")
        return model.objects.using(self.alias)

    def find_by_id(self, kind, pk):
        return self.objects(kind).filter(pk=pk).first()

    def find_for_update(self, kind, pk):
        """Row-locked read. Must be called inside ``atomic()``."""
        return self.objects(kind).select_for_update().filter(pk=pk).first()

    def find_by_unique_key(self, kind, key):
        field = UNIQUE_KEYS.get(kind)
        if field is None:
            raise ValueError(f"{kind} records have no unique key")
        return self.objects(kind).filter(**{field: key}).first()

    def find_user_by_login(self, identifier):
        user = self.find_by_unique_key("user", identifier)
        if user is not None:
            return user
        users = list(self.objects("user").filter(email__iexact=identifier)[:2])
        # Ambiguous emails never resolve to an account
        if len(users) == 1:
            return users[0]
        return None

    def related_ids(self, record, relation):
        return set(getattr(record, relation).values_list("pk", flat=True))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record, fields=None, **relations):
        """
        Insert or update ``record``.

        ``fields`` limits the UPDATE to the named columns so concurrent
        writers of other columns are not overwritten. Keyword ``relations``
        replace many-to-many sets, e.g. ``save(user, [], favorites={1, 2})``.
        """
        if fields is None or fields:
            record.save(using=self.alias, update_fields=fields)
        for name, ids in relations.items():
            getattr(record, name).set(ids)
        return record

    def delete_by_id(self, kind, pk):
        deleted, _ = self.objects(kind).filter(pk=pk).delete()
        return deleted > 0

    # ------------------------------------------------------------------
    # Aggregates & listings
    # ------------------------------------------------------------------

    def distinct_tag_list(self):
        tags = set()
        for tag_list in self.objects("article").values_list("tag_list", flat=True):
            tags.update(tag_list or [])
        return tags

    def query_articles(self, tag=None, author=None, favorited_by=None, followed_by=None):
        articles = self.objects("article").select_related("author")
        if author is not None:
            articles = articles.filter(author=author)
        if favorited_by is not None:
            articles = articles.filter(favorited_by=favorited_by)
        if followed_by is not None:
            articles = articles.filter(author__followers=followed_by)
        if tag:
            # JSON containment is not portable across backends
            tagged_ids = [
                pk for pk, tag_list in articles.values_list("pk", "tag_list")
                if tag in (tag_list or [])
            ]
            articles = articles.filter(pk__in=tagged_ids)
        return articles.order_by("-created_at", "-id")

    def comments_for(self, article):
        return self.objects("comment").filter(article=article).select_related("author").order_by("created_at", "id")

    def count_comments(self, article):
        return self.objects("comment").filter(article=article).count()


def get_store():
    """Process-wide store created by PublishingConfig.ready()."""
    return apps.get_app_config("publishing").store
