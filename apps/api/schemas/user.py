from pydantic import BaseModel


class FollowUserOut(BaseModel):
    id: str
    name: str
    image: str | None = None
    palates: list[str] = []
    isFollowing: bool = False


class FollowUserPageOut(BaseModel):
    items: list[FollowUserOut]
    nextCursor: str | None = None
    hasMore: bool = False


class FollowStatusOut(BaseModel):
    isFollowing: bool


class FollowResultOut(BaseModel):
    status: str = "success"
    isFollowing: bool


class FollowCountsOut(BaseModel):
    followersCount: int
    followingCount: int
