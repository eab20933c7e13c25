"""
================================================================================
BLOGIFY - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models for users, articles, comments and follows
@version     1.0.0

MODULE PURPOSE
================================================================================
This module defines the database schema of the publishing backend:
- User model (extended from AbstractUser) with its relationship sets
- Articles with a denormalized favorites counter and an authored tag list
- Comments owned by an article and an author
- Follow rows backing the user-to-user "following" set

MODEL RELATIONSHIPS
================================================================================
User (1) ──────> (N) Article      (author)
User (1) ──────> (N) Comment      (author)
Article (1) ───> (N) Comment      (ordered comment sequence)

User (N) <─────> (N) Article      (favorites)
User (N) <─────> (N) User         (following, through Follow)

INVARIANTS
================================================================================
- Article.favorites_count equals the number of users whose favorites set
  contains the article. Only publishing.toggles writes either side.
- A Follow row never links a user to itself (database check constraint).
- Articles and comments never change author after creation.

================================================================================
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


# ============================================================================
# SECTION 1: USER MODELS
# ============================================================================

class User(AbstractUser):
    """
    Extended User model with publishing profile fields.

    Attributes:
        name (CharField): Display name
        bio (TextField): Profile biography
        image (CharField): Image reference (URL)
        favorites (ManyToManyField): Articles this user favorited
        following (ManyToManyField): Users this user follows (through Follow)

    Related Names:
        articles: QuerySet of authored Article objects
        comments: QuerySet of authored Comment objects
        followers: QuerySet of User objects following this user
    """

    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name"
    )
    bio = models.TextField(
        max_length=500,
        blank=True,
        help_text="Profile biography or description"
    )
    image = models.CharField(
        max_length=500,
        blank=True,
        help_text="Profile image reference (URL)"
    )

    # --- Relationship sets (mutated only by the toggle engine) ---
    favorites = models.ManyToManyField(
        'Article',
        related_name='favorited_by',
        blank=True,
        help_text="Articles this user favorited"
    )
    following = models.ManyToManyField(
        'self',
        through='Follow',
        through_fields=('follower', 'followed'),
        symmetrical=False,
        related_name='followers',
        blank=True,
        help_text="Users this user follows"
    )

    def __str__(self):
        return self.username


class Follow(models.Model):
    """
    One-way follow connection between two users.

    Meta:
        unique_together: Prevents duplicate follow relationships
        constraints: A user cannot follow itself
    """

    follower = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='follow_links',
        help_text="User who is following"
    )
    followed = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='follower_links',
        help_text="User being followed"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('follower', 'followed')
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(follower=models.F('followed')),
                name='follow_not_self',
            ),
        ]

    def __str__(self):
        return f"{self.follower_id} -> {self.followed_id}"


# ============================================================================
# SECTION 2: CONTENT MODELS
# ============================================================================

class Article(models.Model):
    """
    Authored article.

    Attributes:
        author (ForeignKey): Owning user, immutable after creation
        title (CharField): Article title
        description (CharField): Short summary
        body (TextField): Article body
        tag_list (JSONField): Tags in authored order, duplicates kept
        favorites_count (PositiveIntegerField): Cached number of favorites
        created_at (DateTimeField): Creation timestamp
        updated_at (DateTimeField): Last edit timestamp

    Related Names:
        comments: QuerySet of Comment objects, oldest first
        favorited_by: QuerySet of users who favorited the article

    Meta:
        ordering: Newest first (descending created_at)
    """

    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='articles',
        help_text="Author of this article"
    )
    title = models.CharField(max_length=255)
    description = models.CharField(max_length=500)
    body = models.TextField()
    tag_list = models.JSONField(
        default=list,
        blank=True,
        help_text="Tags in the order the author wrote them"
    )
    favorites_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of users who favorited this article"
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.author} - {self.title[:50]}"


class Comment(models.Model):
    """
    Comment on an article.

    Both the author and the parent article are fixed at creation.
    Deleting the comment detaches it from the article's comment sequence.
    """

    article = models.ForeignKey(
        Article,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Article being commented on"
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Comment author"
    )
    body = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.author} on {self.article_id}: {self.body[:30]}"
