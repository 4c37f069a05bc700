"""Tests for the authentication context and the message catalogue."""

from unittest.mock import Mock

import jwt
import pytest

from tastyplates.interactions import messages
from tastyplates.interactions.notifications import RecordingNotifier, Toast, ToastKind
from tastyplates.services.outcome import RejectionReason
from tastyplates.session.auth import HOME, AuthContext, CurrentUser


class TestCurrentUser:
    def test_from_token_reads_claims(self):
        token = jwt.encode({"sub": "42", "name": "Mia", "picture": "m.png"}, "k" * 32, algorithm="HS256")

        user = CurrentUser.from_token(token)

        assert user == CurrentUser(id="42", access_token=token, name="Mia", image="m.png")

    def test_from_token_requires_subject(self):
        token = jwt.encode({"name": "Mia"}, "k" * 32, algorithm="HS256")

        with pytest.raises(ValueError, match="no subject"):
            CurrentUser.from_token(token)

    def test_from_token_rejects_garbage(self):
        with pytest.raises(jwt.PyJWTError):
            CurrentUser.from_token("not-a-token")


class TestAuthContext:
    def test_sign_in_and_out(self, user):
        auth = AuthContext()
        assert not auth.is_authenticated

        auth.sign_in(user)
        assert auth.current_user is user

        auth.sign_out()
        assert auth.current_user is None

    def test_require_user_prompts_when_signed_out(self):
        prompt = Mock()
        auth = AuthContext(on_sign_in_required=prompt)

        assert auth.require_user() is None
        prompt.assert_called_once_with()

    def test_require_user_returns_user(self, user):
        prompt = Mock()
        auth = AuthContext(user, on_sign_in_required=prompt)

        assert auth.require_user() is user
        prompt.assert_not_called()

    def test_force_sign_out(self, user):
        redirect = Mock()
        storage = {"session": "abc", "prefs": "x"}
        auth = AuthContext(user, on_redirect=redirect, storage=storage)

        auth.force_sign_out("invalid_token")

        assert auth.current_user is None
        assert storage == {}
        redirect.assert_called_once_with(HOME)


class TestMessages:
    def test_comment_rejected(self):
        assert messages.comment_rejected(RejectionReason.DUPLICATE) == messages.COMMENT_DUPLICATE
        assert messages.comment_rejected(RejectionReason.REPLY_LIMIT, 3) == messages.maximum_comment_replies(3)
        assert messages.comment_rejected(RejectionReason.VALIDATION) == messages.ERROR_OCCURRED

    def test_cooldown_wait(self):
        assert messages.cooldown_wait(4) == "Please wait 4s before commenting again..."


class TestRecordingNotifier:
    def test_records_in_order(self):
        notifier = RecordingNotifier()
        notifier.error("a")
        notifier.success("b")

        assert notifier.toasts == [Toast(ToastKind.ERROR, "a"), Toast(ToastKind.SUCCESS, "b")]
        assert notifier.errors == ["a"]
        assert notifier.successes == ["b"]

        notifier.clear()
        assert notifier.toasts == []
