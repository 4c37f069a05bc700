"""Shared fixtures for interaction tests.

Services are replaced by mocks whose coroutine methods are ``AsyncMock``s, so
each test decides what the "server" answers and can inspect local state
while a call is in flight.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from tastyplates.interactions.follow_registry import FollowStateRegistry
from tastyplates.interactions.notifications import RecordingNotifier
from tastyplates.services.follows import FollowService
from tastyplates.services.outcome import Outcome
from tastyplates.services.reviews import ReviewService
from tastyplates.services.restaurants import RestaurantService
from tastyplates.services.schemas import FavoriteState, FollowCounts, Page
from tastyplates.session.auth import AuthContext, CurrentUser


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def user():
    return CurrentUser(id="1", access_token="tok", name="Viewer", image="me.png")


@pytest.fixture
def sign_in_prompt():
    return Mock()


@pytest.fixture
def auth(user, sign_in_prompt):
    return AuthContext(user, on_sign_in_required=sign_in_prompt)


@pytest.fixture
def anonymous(sign_in_prompt):
    return AuthContext(on_sign_in_required=sign_in_prompt)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry():
    return FollowStateRegistry()


@pytest.fixture
def reviews():
    service = Mock(spec=ReviewService)
    service.like_comment = AsyncMock()
    service.unlike_comment = AsyncMock()
    service.post_comment = AsyncMock(return_value=Outcome.accept({"status": "approved"}))
    service.fetch_comment_replies = AsyncMock(return_value=[])
    return service


@pytest.fixture
def follows():
    service = Mock(spec=FollowService)
    service.follow_user = AsyncMock(return_value=Outcome.accept())
    service.unfollow_user = AsyncMock(return_value=Outcome.accept())
    service.is_following_user = AsyncMock(return_value=False)
    service.get_following_list = AsyncMock(return_value=Page(items=[]))
    service.get_followers_list = AsyncMock(return_value=Page(items=[]))
    service.get_follow_counts = AsyncMock(return_value=FollowCounts())
    return service


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def restaurants():
    service = Mock(spec=RestaurantService)
    service.save_restaurant = AsyncMock(return_value=Outcome.accept(FavoriteState(status="saved")))
    service.unsave_restaurant = AsyncMock(
        return_value=Outcome.accept(FavoriteState(status="unsaved"))
    )
    service.is_saved = AsyncMock(return_value=False)
    return service
