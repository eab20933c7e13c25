"""
Relationship toggles: favorite an article, follow a user.

Both are the same set-membership flip. ``toggle`` computes the new state from
plain values; ``RelationshipToggles`` loads the records under row locks,
applies it, and writes subject and target back in one transaction so a
membership change never lands without its counter change.
"""

import logging
from collections import namedtuple

from .exceptions import InvalidOperation, NotFound, Unauthorized
from .payloads import Viewer, article_payload, profile_payload
from .results import Result

logger = logging.getLogger(__name__)


Toggle = namedtuple("Toggle", ["member", "members", "count"])


def toggle(target_id, members, count=None):
    """
    Flip membership of ``target_id`` in ``members``.

    Args:
        target_id: Id being added or removed
        members: Current membership set of the subject
        count: Target's counter, or None when the relationship has none

    Returns:
        Toggle: ``member`` is the new membership, ``members`` the new set,
        ``count`` the new counter (never below zero)
    """
    members = set(members)
    if target_id in members:
        members.discard(target_id)
        if count is not None:
            count = max(count - 1, 0)
        return Toggle(False, frozenset(members), count)

    members.add(target_id)
    if count is not None:
        count += 1
    return Toggle(True, frozenset(members), count)


class RelationshipToggles:

    def __init__(self, store):
        self.store = store

    def _lock_subject(self, identity):
        user = self.store.find_for_update("user", identity.user_id)
        if user is None:
            raise Unauthorized("Account no longer exists")
        return user

    def favorite(self, identity, article_id):
        with self.store.atomic():
            article = self.store.find_for_update("article", article_id)
            if article is None:
                raise NotFound("Article not found")
            user = self._lock_subject(identity)

            favorites = self.store.related_ids(user, "favorites")
            outcome = toggle(article.pk, favorites, article.favorites_count)

            article.favorites_count = outcome.count
            self.store.save(article, fields=["favorites_count"])
            self.store.save(user, fields=[], favorites=outcome.members)

        action = "favorited" if outcome.member else "unfavorited"
        logger.info(f"User {identity.user_id} {action} article {article.pk}")

        viewer = Viewer(identity, favorites=outcome.members,
                        following=self.store.related_ids(user, "following"))
        return Result.ok({"article": article_payload(article, viewer)})

    def follow(self, identity, username):
        target = self.store.find_by_unique_key("user", username)
        if target is None:
            raise NotFound("User not found")
        if target.pk == identity.user_id:
            raise InvalidOperation("Cannot follow yourself")

        with self.store.atomic():
            user = self._lock_subject(identity)
            following = self.store.related_ids(user, "following")
            outcome = toggle(target.pk, following)
            self.store.save(user, fields=[], following=outcome.members)

        action = "followed" if outcome.member else "unfollowed"
        logger.info(f"User {identity.user_id} {action} {target.username}")

        viewer = Viewer(identity, following=outcome.members)
        return Result.ok({"profile": profile_payload(target, viewer)})
