from django.core.paginator import Paginator
from django.db.models import Count
from django.http import HttpRequest
from ninja import Query, Router
from ninja.responses import codes_4xx

from forum.schemas import Message
from users.models import User
from users.schemas import PaginatedUserPostsResponse, UserProfileOut

router = Router(tags=["Users"])


"""
Public Profile API
"""


@router.get("/{username}", response={200: UserProfileOut, codes_4xx: Message})
def get_user_profile(request: HttpRequest, username: str):
    try:
        user = User.objects.get(username=username, is_active=True)
    except User.DoesNotExist:
        return 404, {"message": "User not found"}
    return 200, UserProfileOut.resolve_profile(user)


@router.get(
    "/{username}/posts", response={200: PaginatedUserPostsResponse, codes_4xx: Message}
)
def list_user_posts(
    request: HttpRequest,
    username: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
):
    try:
        user = User.objects.get(username=username, is_active=True)
    except User.DoesNotExist:
        return 404, {"message": "User not found"}

    posts = user.posts.annotate(
        likes_count=Count("likes", distinct=True),
        comments_count=Count("comments", distinct=True),
    ).order_by("-created_at", "-id")

    paginator = Paginator(posts, per_page)
    page_obj = paginator.get_page(page)
    return 200, {
        "items": [
            {
                "id": post.id,
                "title": post.title,
                "created_at": post.created_at,
                "likes_count": post.likes_count,
                "comments_count": post.comments_count,
            }
            for post in page_obj
        ],
        "total": paginator.count,
        "page": page_obj.number,
        "per_page": per_page,
        "num_pages": paginator.num_pages,
        "next_page": page_obj.next_page_number() if page_obj.has_next() else None,
    }
