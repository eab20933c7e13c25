"""JSON payload builders for users, profiles, articles and comments."""

from .guards import is_owner


def _timestamp(value):
    return value.isoformat().replace("+00:00", "Z") if value else None


class Viewer:
    """
    Relationship sets of the caller, loaded once per request.

    An anonymous viewer follows nobody and has favorited nothing.
    """

    def __init__(self, identity=None, favorites=(), following=()):
        self.identity = identity
        self.favorites = set(favorites)
        self.following = set(following)

    @classmethod
    def load(cls, store, identity):
        if identity is None:
            return cls()
        user = store.find_by_id("user", identity.user_id)
        if user is None:
            return cls(identity)
        return cls(
            identity,
            favorites=store.related_ids(user, "favorites"),
            following=store.related_ids(user, "following"),
        )


def user_payload(user, token=None):
    payload = {
        "id": user.pk,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "bio": user.bio,
        "image": user.image,
    }
    if token is not None:
        payload["token"] = token
    return payload


def profile_payload(user, viewer):
    return {
        "id": user.pk,
        "username": user.username,
        "name": user.name,
        "bio": user.bio,
        "image": user.image,
        "following": user.pk in viewer.following,
    }


def article_payload(article, viewer, comments_count=None):
    payload = {
        "id": article.pk,
        "title": article.title,
        "description": article.description,
        "body": article.body,
        "tagList": list(article.tag_list or []),
        "createdAt": _timestamp(article.created_at),
        "updatedAt": _timestamp(article.updated_at),
        "favorited": article.pk in viewer.favorites,
        "favoritesCount": article.favorites_count,
        "canEdit": is_owner(article, viewer.identity),
        "author": profile_payload(article.author, viewer),
    }
    if comments_count is not None:
        payload["commentsCount"] = comments_count
    return payload


def comment_payload(comment, viewer):
    return {
        "id": comment.pk,
        "body": comment.body,
        "article": comment.article_id,
        "createdAt": _timestamp(comment.created_at),
        "updatedAt": _timestamp(comment.updated_at),
        "canEdit": is_owner(comment, viewer.identity),
        "author": profile_payload(comment.author, viewer),
    }
