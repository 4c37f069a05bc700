"""Pydantic models for payloads exchanged with the review platform."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class _PlatformModel(BaseModel):
    """Accepts the platform's camelCase keys as well as field names."""

    model_config = ConfigDict(populate_by_name=True)


class LikeState(_PlatformModel):
    """Authoritative like flag and count returned after a like/unlike."""

    user_liked: bool = Field(..., alias="userLiked")
    likes_count: int = Field(..., alias="likesCount", ge=0)


class Review(_PlatformModel):
    """A review or a reply, as listed by the platform."""

    id: str
    content: str = ""
    title: Optional[str] = None
    author_id: Optional[str] = Field(None, alias="authorId")
    author_name: Optional[str] = Field(None, alias="authorName")
    author_image: Optional[str] = Field(None, alias="authorImage")
    likes_count: int = Field(0, alias="likesCount", ge=0)
    user_liked: bool = Field(False, alias="userLiked")
    created_at: Optional[str] = Field(None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)


class Reply(Review):
    """A reply under a review. Optimistic replies only exist client-side."""

    parent_id: Optional[str] = Field(None, alias="parentId")
    is_optimistic: bool = Field(False, alias="isOptimistic")


class FollowUser(_PlatformModel):
    """An entry of a follower/following list."""

    id: str
    name: str = ""
    image: Optional[str] = None
    palates: List[str] = Field(default_factory=list)
    is_following: bool = Field(False, alias="isFollowing")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("palates", mode="before")
    @classmethod
    def split_palates(cls, v):
        """Palates arrive either as a list or as a ``|`` separated string."""
        if v is None:
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split("|") if p.strip()]
        return v


class Page(_PlatformModel, Generic[T]):
    """One page of a cursor-paginated list."""

    items: List[T] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(None, alias="nextCursor")
    has_more: bool = Field(False, alias="hasMore")


class FollowStatus(_PlatformModel):
    """Answer of the follow-status endpoint."""

    is_following: bool = Field(False, alias="isFollowing")


class CommentPayload(_PlatformModel):
    """Body of a new reply."""

    parent_id: str = Field(..., alias="parentId")
    content: str
    restaurant_id: Optional[str] = Field(None, alias="restaurantId")

    @field_validator("parent_id", mode="before")
    @classmethod
    def coerce_parent_id(cls, v):
        return str(v)


class FollowCounts(_PlatformModel):
    """Follower and following totals of one user."""

    followers_count: int = Field(0, alias="followersCount", ge=0)
    following_count: int = Field(0, alias="followingCount", ge=0)


class FavoriteState(_PlatformModel):
    """Answer of the wishlist endpoints: ``"saved"`` or ``"unsaved"``."""

    status: str

    @property
    def saved(self) -> bool:
        return self.status == "saved"
