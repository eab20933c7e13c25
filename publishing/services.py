"""
Publishing operations.

Each service receives the store handle at construction and an explicit
IdentityRef per call. Operations return ``Result`` records and raise
``ServiceError`` subclasses for every expected failure.
"""

import logging

from django.core.paginator import Paginator
from django.db import IntegrityError

from .exceptions import Conflict, NotFound, Unauthorized
from .guards import assert_owner
from .identity import issue_token
from .models import Article, Comment, User
from .payloads import (
    Viewer, article_payload, comment_payload, profile_payload, user_payload,
)
from .results import Result
from .schemas import (
    ArticleForm, ArticleUpdateForm, CommentForm, LoginForm, RegisterForm,
    UserUpdateForm, validate,
)

logger = logging.getLogger(__name__)


# ============================================================================
# ACCOUNTS
# ============================================================================

class AccountService:

    def __init__(self, store):
        self.store = store

    def register(self, data):
        form = validate(RegisterForm, data)
        fields = form.cleaned_data

        if self.store.find_by_unique_key("user", fields["username"]) is not None:
            raise Conflict("Username already taken")
        if fields["email"] and self.store.objects("user").filter(email__iexact=fields["email"]).exists():
            raise Conflict("Email already registered")

        user = User(username=fields["username"], name=fields["name"], email=fields["email"])
        user.set_password(fields["password"])
        try:
            with self.store.atomic():
                self.store.save(user)
        except IntegrityError as e:
            logger.warning(f"IntegrityError during registration: {str(e)}")
            raise Conflict("Username or email already taken")

        logger.info(f"Registered user {user.username}")
        return Result.created({"user": user_payload(user, token=issue_token(user))})

    def login(self, data):
        form = validate(LoginForm, data)
        user = self.store.find_user_by_login(form.cleaned_data["username"].strip())
        if user is None or not user.is_active or not user.check_password(form.cleaned_data["password"]):
            logger.warning(f"Failed login for {form.cleaned_data['username']!r}")
            raise Unauthorized("Invalid username or password")
        return Result.ok({"user": user_payload(user, token=issue_token(user))})

    def current_user(self, identity):
        user = self.store.find_by_id("user", identity.user_id)
        if user is None:
            raise Unauthorized("Account no longer exists")
        return Result.ok({"user": user_payload(user)})

    def update_user(self, identity, data):
        form = validate(UserUpdateForm, data)
        changes = form.changed_fields()

        with self.store.atomic():
            user = self.store.find_for_update("user", identity.user_id)
            if user is None:
                raise Unauthorized("Account no longer exists")

            email = changes.get("email")
            if email and self.store.objects("user").filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise Conflict("Email already registered")

            fields = []
            for name in ("name", "email", "bio", "image"):
                if name in changes:
                    setattr(user, name, changes[name])
                    fields.append(name)
            if changes.get("password"):
                user.set_password(changes["password"])
                fields.append("password")
            self.store.save(user, fields=fields)

        return Result.ok({"user": user_payload(user)})

    def profile(self, identity, username):
        user = self.store.find_by_unique_key("user", username)
        if user is None:
            raise NotFound("User not found")
        viewer = Viewer.load(self.store, identity)
        return Result.ok({"profile": profile_payload(user, viewer)})


# ============================================================================
# ARTICLES
# ============================================================================

class ArticleService:

    def __init__(self, store, page_size=20):
        self.store = store
        self.page_size = page_size

    def _get(self, article_id):
        article = self.store.find_by_id("article", article_id)
        if article is None:
            raise NotFound("Article not found")
        return article

    def _page(self, articles, viewer, page=None, limit=None):
        try:
            limit = max(1, min(int(limit), 100)) if limit else self.page_size
        except (TypeError, ValueError):
            limit = self.page_size
        paginator = Paginator(articles, limit)
        page_obj = paginator.get_page(page)
        return Result.ok({
            "articles": [article_payload(article, viewer) for article in page_obj],
            "articlesCount": paginator.count,
            "page": page_obj.number,
            "pages": paginator.num_pages,
        })

    def list_articles(self, identity, tag=None, author=None, favorited=None, page=None, limit=None):
        viewer = Viewer.load(self.store, identity)
        filters = {"tag": tag}
        if author:
            filters["author"] = self.store.find_by_unique_key("user", author)
        if favorited:
            filters["favorited_by"] = self.store.find_by_unique_key("user", favorited)
        if (author and filters["author"] is None) or (favorited and filters["favorited_by"] is None):
            return self._page(self.store.objects("article").none(), viewer, page, limit)
        return self._page(self.store.query_articles(**filters), viewer, page, limit)

    def feed(self, identity, page=None, limit=None):
        viewer = Viewer.load(self.store, identity)
        articles = self.store.query_articles(followed_by=identity.user_id)
        return self._page(articles, viewer, page, limit)

    def get(self, identity, article_id):
        article = self._get(article_id)
        viewer = Viewer.load(self.store, identity)
        return Result.ok({
            "article": article_payload(article, viewer, self.store.count_comments(article))
        })

    def create(self, identity, data):
        form = validate(ArticleForm, data)
        fields = form.cleaned_data
        article = Article(
            author_id=identity.user_id,
            title=fields["title"],
            description=fields["description"],
            body=fields["body"],
            tag_list=fields["tagList"],
        )
        self.store.save(article)
        logger.info(f"User {identity.user_id} created article {article.pk}")

        viewer = Viewer.load(self.store, identity)
        return Result.created({"article": article_payload(article, viewer, 0)})

    def update(self, identity, article_id, data):
        form = validate(ArticleUpdateForm, data)
        changes = form.changed_fields()

        with self.store.atomic():
            article = self.store.find_for_update("article", article_id)
            if article is None:
                raise NotFound("Article not found")
            assert_owner(article, identity)

            fields = []
            for name, attr in (("title", "title"), ("description", "description"),
                               ("body", "body"), ("tagList", "tag_list")):
                if name in changes:
                    setattr(article, attr, changes[name])
                    fields.append(attr)
            if fields:
                fields.append("updated_at")
            self.store.save(article, fields=fields)

        logger.info(f"User {identity.user_id} updated article {article.pk}")
        viewer = Viewer.load(self.store, identity)
        return Result.ok({
            "article": article_payload(article, viewer, self.store.count_comments(article))
        })

    def delete(self, identity, article_id):
        with self.store.atomic():
            article = self.store.find_for_update("article", article_id)
            if article is None:
                raise NotFound("Article not found")
            assert_owner(article, identity)
            self.store.delete_by_id("article", article.pk)

        logger.info(f"User {identity.user_id} deleted article {article_id}")
        return Result.ok({"message": "Article deleted"})

    def tags(self):
        return Result.ok({"tags": sorted(self.store.distinct_tag_list())})


# ============================================================================
# COMMENTS
# ============================================================================

class CommentService:

    def __init__(self, store):
        self.store = store

    def _get_article(self, article_id):
        article = self.store.find_by_id("article", article_id)
        if article is None:
            raise NotFound("Article not found")
        return article

    def _lock(self, article_id, comment_id):
        comment = self.store.find_for_update("comment", comment_id)
        # A comment addressed under another article does not exist there
        if comment is None or comment.article_id != article_id:
            raise NotFound("Comment not found")
        return comment

    def list_comments(self, identity, article_id):
        article = self._get_article(article_id)
        viewer = Viewer.load(self.store, identity)
        return Result.ok({
            "comments": [comment_payload(c, viewer) for c in self.store.comments_for(article)]
        })

    def create(self, identity, article_id, data):
        form = validate(CommentForm, data)
        article = self._get_article(article_id)
        comment = Comment(article=article, author_id=identity.user_id, body=form.cleaned_data["body"])
        self.store.save(comment)
        logger.info(f"User {identity.user_id} commented {comment.pk} on article {article.pk}")

        viewer = Viewer.load(self.store, identity)
        return Result.created({"comment": comment_payload(comment, viewer)})

    def update(self, identity, article_id, comment_id, data):
        form = validate(CommentForm, data)
        with self.store.atomic():
            comment = self._lock(article_id, comment_id)
            assert_owner(comment, identity)
            comment.body = form.cleaned_data["body"]
            self.store.save(comment, fields=["body", "updated_at"])

        viewer = Viewer.load(self.store, identity)
        return Result.ok({"comment": comment_payload(comment, viewer)})

    def delete(self, identity, article_id, comment_id):
        with self.store.atomic():
            comment = self._lock(article_id, comment_id)
            assert_owner(comment, identity)
            self.store.delete_by_id("comment", comment.pk)

        logger.info(f"User {identity.user_id} deleted comment {comment_id} on article {article_id}")
        return Result.ok({"message": "Comment deleted"})
