"""
================================================================================
BLOGIFY - API URL CONFIGURATION
================================================================================

@file        urls.py
@description URL routing for the publishing JSON API (mounted under /api/)
@version     1.0.0

URL STRUCTURE OVERVIEW
================================================================================
1. Users & Authentication (register, login, logout, current user)
2. Profiles & Following
3. Articles (CRUD, feed, favorites)
4. Comments
5. Tags

NAMING CONVENTIONS
================================================================================
- Collections: <resource>_list (e.g. 'article_list', 'comment_list')
- Single resources: <resource>_detail
- Toggles: Prefixed with 'toggle_' (e.g. 'toggle_follow', 'toggle_favorite')

URL PARAMETER TYPES
================================================================================
- <str:username>: Username string
- <int:article_id>: Article primary key
- <int:comment_id>: Comment primary key

================================================================================
"""

from django.urls import path
from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: USERS & AUTHENTICATION
    # ========================================================================

    path(
        "users",
        views.register,
        name="register"
    ),  # Create account, returns token

    path(
        "users/login",
        views.login_view,
        name="login"
    ),  # Exchange credentials for a token

    path(
        "users/logout",
        views.logout_view,
        name="logout"
    ),  # Clear the token cookie

    path(
        "user",
        views.current_user,
        name="current_user"
    ),  # GET own account, PUT to update it


    # ========================================================================
    # SECTION 2: PROFILES & FOLLOWING
    # ========================================================================

    path(
        "profiles/<str:username>",
        views.profile,
        name="profile"
    ),  # Public profile with following flag

    path(
        "profiles/<str:username>/follow",
        views.toggle_follow,
        name="toggle_follow"
    ),  # Follow/unfollow user


    # ========================================================================
    # SECTION 3: ARTICLES
    # ========================================================================

    path(
        "articles",
        views.article_list,
        name="article_list"
    ),  # GET filtered listing, POST to create

    path(
        "articles/feed",
        views.article_feed,
        name="article_feed"
    ),  # Articles by followed authors

    path(
        "articles/<int:article_id>",
        views.article_detail,
        name="article_detail"
    ),  # GET, PUT (author only), DELETE (author only)

    path(
        "articles/<int:article_id>/favorite",
        views.toggle_favorite,
        name="toggle_favorite"
    ),  # Favorite/unfavorite article


    # ========================================================================
    # SECTION 4: COMMENTS
    # ========================================================================

    path(
        "articles/<int:article_id>/comments",
        views.comment_list,
        name="comment_list"
    ),  # GET ordered comments, POST to add one

    path(
        "articles/<int:article_id>/comments/<int:comment_id>",
        views.comment_detail,
        name="comment_detail"
    ),  # PUT/DELETE (comment author only)


    # ========================================================================
    # SECTION 5: TAGS
    # ========================================================================

    path(
        "tags",
        views.tag_list,
        name="tag_list"
    ),  # Distinct tags across all articles
]
