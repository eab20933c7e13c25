import json
import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import InvalidInput, ServiceError
from .identity import authenticate_request
from .results import Result
from .services import AccountService, ArticleService, CommentService
from .stores import get_store
from .toggles import RelationshipToggles


# Logger
logger = logging.getLogger(__name__)


def api_view(*methods):
    """JSON endpoint: restrict methods, skip CSRF, render Results and ServiceErrors."""
    def decorator(view):
        @csrf_exempt
        @require_http_methods(list(methods))
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                result = view(request, *args, **kwargs)
            except ServiceError as error:
                result = Result.failure(error)
            return result.as_response()
        return wrapper
    return decorator


def read_json(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInput("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def set_token_cookie(response, token):
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=getattr(settings, "SESSION_COOKIE_SECURE", False),
        samesite="Lax",
    )
    return response


def accounts():
    return AccountService(get_store())


def articles():
    return ArticleService(get_store(), page_size=settings.ARTICLES_PAGE_SIZE)


def comments():
    return CommentService(get_store())


def toggles():
    return RelationshipToggles(get_store())


# ============================================================================
# ROOT
# ============================================================================

@require_http_methods(["GET"])
def index(request):
    return JsonResponse("Blogify! Knowledge creation at best", safe=False)


# ============================================================================
# USERS & AUTHENTICATION
# ============================================================================

@csrf_exempt
@require_http_methods(["POST"])
def register(request):
    try:
        result = accounts().register(read_json(request))
    except ServiceError as error:
        return Result.failure(error).as_response()
    return set_token_cookie(result.as_response(), result.payload["user"]["token"])


@csrf_exempt
@require_http_methods(["POST"])
def login_view(request):
    try:
        result = accounts().login(read_json(request))
    except ServiceError as error:
        return Result.failure(error).as_response()
    return set_token_cookie(result.as_response(), result.payload["user"]["token"])


@csrf_exempt
@require_http_methods(["POST"])
def logout_view(request):
    response = Result.ok({"message": "Logged out"}).as_response()
    response.delete_cookie(settings.TOKEN_COOKIE_NAME, samesite="Lax")
    return response


@api_view("GET", "PUT")
def current_user(request):
    identity = authenticate_request(request)
    if request.method == "PUT":
        return accounts().update_user(identity, read_json(request))
    return accounts().current_user(identity)


# ============================================================================
# PROFILES
# ============================================================================

@api_view("GET")
def profile(request, username):
    identity = authenticate_request(request, optional=True)
    return accounts().profile(identity, username)


@api_view("POST")
def toggle_follow(request, username):
    identity = authenticate_request(request)
    return toggles().follow(identity, username)


# ============================================================================
# ARTICLES
# ============================================================================

@api_view("GET", "POST")
def article_list(request):
    if request.method == "POST":
        identity = authenticate_request(request)
        return articles().create(identity, read_json(request))

    identity = authenticate_request(request, optional=True)
    return articles().list_articles(
        identity,
        tag=request.GET.get("tag"),
        author=request.GET.get("author"),
        favorited=request.GET.get("favorited"),
        page=request.GET.get("page"),
        limit=request.GET.get("limit"),
    )


@api_view("GET")
def article_feed(request):
    identity = authenticate_request(request)
    return articles().feed(identity, page=request.GET.get("page"), limit=request.GET.get("limit"))


@api_view("GET", "PUT", "DELETE")
def article_detail(request, article_id):
    if request.method == "GET":
        identity = authenticate_request(request, optional=True)
        return articles().get(identity, article_id)

    identity = authenticate_request(request)
    if request.method == "PUT":
        return articles().update(identity, article_id, read_json(request))
    return articles().delete(identity, article_id)


@api_view("POST")
def toggle_favorite(request, article_id):
    identity = authenticate_request(request)
    return toggles().favorite(identity, article_id)


@api_view("GET")
def tag_list(request):
    return articles().tags()


# ============================================================================
# COMMENTS
# ============================================================================

@api_view("GET", "POST")
def comment_list(request, article_id):
    if request.method == "POST":
        identity = authenticate_request(request)
        return comments().create(identity, article_id, read_json(request))

    identity = authenticate_request(request, optional=True)
    return comments().list_comments(identity, article_id)


@api_view("PUT", "DELETE")
def comment_detail(request, article_id, comment_id):
    identity = authenticate_request(request)
    if request.method == "PUT":
        return comments().update(identity, article_id, comment_id, read_json(request))
    return comments().delete(identity, article_id, comment_id)
