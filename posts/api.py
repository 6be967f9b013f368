import logging
from typing import List, Literal, Optional

from django.core.paginator import Paginator
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.http import HttpRequest
from ninja import Query, Router
from ninja.responses import codes_4xx

from forum.schemas import Message
from posts.models import Comment, Like, Post
from posts.schemas import (
    CommentCreateSchema,
    CommentOut,
    CommentUpdateSchema,
    LikeOut,
    PaginatedPostsResponse,
    PostCreateSchema,
    PostOut,
)
from users.auth import SessionUserAuth, get_optional_user

router = Router(tags=["Posts"])

logger = logging.getLogger(__name__)

SORT_FIELDS = {"created_at": "created_at", "title": "title", "likes": "likes_count"}


def annotated_posts():
    return Post.objects.select_related("author").annotate(
        likes_count=Count("likes", distinct=True),
        comments_count=Count("comments", distinct=True),
    )


"""
Post related endpoints
"""


@router.post("/", response={201: PostOut, codes_4xx: Message}, auth=SessionUserAuth())
def create_post(request: HttpRequest, data: PostCreateSchema):
    user = request.auth
    post = Post.objects.create(author=user, title=data.title, content=data.content)
    logger.info(f"User '{user.username}' created post {post.id}")
    return 201, PostOut.resolve_post(post, user)


@router.get("/", response={200: PaginatedPostsResponse, codes_4xx: Message})
def list_posts(
    request: HttpRequest,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    sort_by: Literal["created_at", "title", "likes"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    search: Optional[str] = None,
    author: Optional[str] = None,
):
    user = get_optional_user(request)
    posts = annotated_posts()

    if search:
        posts = posts.filter(Q(title__icontains=search) | Q(content__icontains=search))

    if author:
        posts = posts.filter(author__username=author)

    order_prefix = "-" if sort_order == "desc" else ""
    posts = posts.order_by(f"{order_prefix}{SORT_FIELDS[sort_by]}", "-id")

    paginator = Paginator(posts, per_page)
    page_obj = paginator.get_page(page)
    return 200, {
        "items": [PostOut.resolve_post(post, user) for post in page_obj],
        "total": paginator.count,
        "page": page_obj.number,
        "per_page": per_page,
        "num_pages": paginator.num_pages,
        "next_page": page_obj.next_page_number() if page_obj.has_next() else None,
    }


@router.get("/{post_id}/", response={200: PostOut, codes_4xx: Message})
def get_post(request: HttpRequest, post_id: int):
    post = annotated_posts().get(id=post_id)
    return 200, PostOut.resolve_post(post, get_optional_user(request))


@router.put(
    "/{post_id}/", response={200: PostOut, codes_4xx: Message}, auth=SessionUserAuth()
)
def update_post(request: HttpRequest, post_id: int, data: PostCreateSchema):
    user = request.auth
    post = Post.objects.select_related("author").get(id=post_id)

    if post.author != user:
        return 403, {"message": "You do not have permission to update this post."}

    post.title = data.title
    post.content = data.content
    post.save()

    return 200, PostOut.resolve_post(post, user)


@router.delete(
    "/{post_id}/", response={204: None, codes_4xx: Message}, auth=SessionUserAuth()
)
def delete_post(request: HttpRequest, post_id: int):
    user = request.auth
    post = Post.objects.get(id=post_id)

    if post.author != user:
        return 403, {"message": "You do not have permission to delete this post."}

    # Likes, comments and replies go with the post (on_delete=CASCADE).
    post.delete()
    logger.info(f"User '{user.username}' deleted post {post_id}")
    return 204, None


"""
Like related endpoints
"""


@router.post(
    "/{post_id}/likes/", response={200: LikeOut, codes_4xx: Message}, auth=SessionUserAuth()
)
def like_post(request: HttpRequest, post_id: int):
    user = request.auth
    post = Post.objects.get(id=post_id)

    try:
        with transaction.atomic():
            Like.objects.get_or_create(user=user, post=post)
    except IntegrityError:
        # A concurrent request created the same like first.
        pass

    return 200, {"liked": True, "likes_count": post.likes.count()}


@router.delete(
    "/{post_id}/likes/", response={200: LikeOut, codes_4xx: Message}, auth=SessionUserAuth()
)
def unlike_post(request: HttpRequest, post_id: int):
    user = request.auth
    post = Post.objects.get(id=post_id)

    Like.objects.filter(user=user, post=post).delete()

    return 200, {"liked": False, "likes_count": post.likes.count()}


"""
Comments related endpoints
"""


@router.get("/{post_id}/comments/", response={200: List[CommentOut], codes_4xx: Message})
def list_post_comments(request: HttpRequest, post_id: int):
    post = Post.objects.get(id=post_id)
    comments = Comment.objects.filter(post=post, parent=None).select_related("author")
    current_user = get_optional_user(request)
    return 200, [
        CommentOut.from_orm_with_replies(comment, current_user) for comment in comments
    ]


@router.post(
    "/{post_id}/comments/",
    response={201: CommentOut, codes_4xx: Message},
    auth=SessionUserAuth(),
)
def create_comment(request: HttpRequest, post_id: int, payload: CommentCreateSchema):
    user = request.auth
    post = Post.objects.get(id=post_id)
    parent_comment = None

    if payload.parent_id:
        parent_comment = Comment.objects.get(id=payload.parent_id)
        if parent_comment.post_id != post.id:
            return 400, {"message": "The parent comment belongs to a different post."}

    comment = Comment.objects.create(
        post=post,
        author=user,
        content=payload.content,
        parent=parent_comment,
    )
    return 201, CommentOut.from_orm_with_replies(comment, user)


@router.put(
    "/comments/{comment_id}/",
    response={200: CommentOut, codes_4xx: Message},
    auth=SessionUserAuth(),
)
def update_comment(request: HttpRequest, comment_id: int, payload: CommentUpdateSchema):
    comment = Comment.objects.select_related("author").get(id=comment_id)

    if comment.author != request.auth:
        return 403, {"message": "You do not have permission to update this comment."}

    comment.content = payload.content
    comment.save()

    return 200, CommentOut.from_orm_with_replies(comment, request.auth)


@router.delete(
    "/comments/{comment_id}/",
    response={204: None, codes_4xx: Message},
    auth=SessionUserAuth(),
)
def delete_comment(request: HttpRequest, comment_id: int):
    comment = Comment.objects.get(id=comment_id)

    if comment.author != request.auth:
        return 403, {"message": "You do not have permission to delete this comment."}

    # Replies are removed with their parent.
    comment.delete()

    return 204, None
