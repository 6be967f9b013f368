from datetime import datetime
from typing import List, Optional

from ninja import Field, Schema

from forum.schemas import AuthorOut, Pagination
from posts.models import Comment, Post
from users.models import User


class PostCreateSchema(Schema):
    title: str = Field(..., min_length=1, max_length=300)
    content: str


class PostOut(Schema):
    id: int
    title: str
    content: str
    author: AuthorOut
    created_at: datetime
    updated_at: datetime
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False
    is_author: bool = False

    @staticmethod
    def resolve_post(post: Post, current_user: Optional[User]):
        # List queries annotate the counts; single objects fall back to COUNT queries.
        likes_count = getattr(post, "likes_count", None)
        comments_count = getattr(post, "comments_count", None)
        return {
            "id": post.id,
            "title": post.title,
            "content": post.content,
            "author": AuthorOut.from_model(post.author),
            "created_at": post.created_at,
            "updated_at": post.updated_at,
            "likes_count": post.likes.count() if likes_count is None else likes_count,
            "comments_count": (
                post.comments.count() if comments_count is None else comments_count
            ),
            "liked": (
                post.likes.filter(user=current_user).exists() if current_user else False
            ),
            "is_author": current_user == post.author if current_user else False,
        }


class PaginatedPostsResponse(Pagination):
    items: List[PostOut]


class CommentOut(Schema):
    id: int
    content: str
    author: AuthorOut
    created_at: datetime
    updated_at: datetime
    replies: List["CommentOut"] = Field(default_factory=list)
    is_author: bool = False

    @staticmethod
    def from_orm_with_replies(comment: Comment, current_user: Optional[User]):
        return CommentOut(
            id=comment.id,
            content=comment.content,
            author=AuthorOut.from_model(comment.author),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            replies=[
                CommentOut.from_orm_with_replies(reply, current_user)
                for reply in comment.replies.select_related("author")
            ],
            is_author=(comment.author == current_user) if current_user else False,
        )


CommentOut.model_rebuild()


class CommentCreateSchema(Schema):
    content: str = Field(..., min_length=1)
    parent_id: Optional[int] = Field(
        None, description="ID of the parent comment if it's a reply"
    )


class CommentUpdateSchema(Schema):
    content: str = Field(..., min_length=1)


class LikeOut(Schema):
    liked: bool
    likes_count: int
