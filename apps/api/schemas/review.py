from pydantic import BaseModel


class CreateCommentRequest(BaseModel):
    content: str


class LikeStateOut(BaseModel):
    userLiked: bool
    likesCount: int


class ReviewOut(BaseModel):
    id: str
    title: str | None = None
    content: str
    authorId: str | None = None
    authorName: str | None = None
    authorImage: str | None = None
    likesCount: int = 0
    userLiked: bool = False
    createdAt: str | None = None
    parentId: str | None = None


class CommentOut(ReviewOut):
    status: str = "approved"


class ReviewPageOut(BaseModel):
    items: list[ReviewOut]
    nextCursor: str | None = None
    hasMore: bool = False
