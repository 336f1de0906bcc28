# mypy: ignore-errors
# tests/v1/test_admin_functions.py
"""Tests for delete-post, delete-comment, ban-user and unban-user."""

from unittest.mock import patch

from fastapi import status
from sqlalchemy.exc import OperationalError

from unitea_functions.models import (
    AdminActionLog,
    Comment,
    Post,
    PostAnonIdentity,
    Profile,
    SecondaryWriteFailure,
)


class TestDeletePost:
    def test_owner_can_delete_without_audit_log(self, client, auth_token, test_post, db_session) -> None:
        post_id = test_post.id
        response = client.post("/api/v1/delete-post", json={"post_id": post_id}, headers=auth_token)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        assert db_session.get(Post, post_id) is None
        assert db_session.query(AdminActionLog).count() == 0

    def test_admin_delete_is_audited(self, client, admin_auth_token, admin_user, test_user, test_post, db_session) -> None:
        post_id = test_post.id
        response = client.post(
            "/api/v1/delete-post", json={"post_id": post_id}, headers=admin_auth_token
        )

        assert response.status_code == status.HTTP_200_OK
        entry = db_session.query(AdminActionLog).one()
        assert entry.action == "delete_post"
        assert entry.admin_id == admin_user.id
        assert entry.target_user_id == test_user.id
        assert entry.target_post_id == post_id
        assert entry.metadata_ == {"deleted_by_owner": False}

    def test_delete_cascades_to_comments_and_anon_ids(
        self, client, auth_token, test_post, db_session
    ) -> None:
        post_id = test_post.id
        client.post(
            "/api/v1/create-comment",
            json={"content": "anon", "post_id": post_id, "is_anonymous": True},
            headers=auth_token,
        )

        client.post("/api/v1/delete-post", json={"post_id": post_id}, headers=auth_token)

        assert db_session.query(Comment).count() == 0
        assert db_session.query(PostAnonIdentity).count() == 0

    def test_stranger_is_forbidden(self, client, other_auth_token, test_post, db_session) -> None:
        response = client.post(
            "/api/v1/delete-post", json={"post_id": test_post.id}, headers=other_auth_token
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert "only the post author or an admin" in response.json()["error"]
        assert db_session.query(Post).count() == 1

    def test_missing_post_is_404(self, client, auth_token) -> None:
        response = client.post(
            "/api/v1/delete-post", json={"post_id": "nope"}, headers=auth_token
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Post not found"}

    def test_post_id_required(self, client, auth_token) -> None:
        response = client.post("/api/v1/delete-post", json={}, headers=auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "post_id is required"}

    def test_audit_log_failure_is_recorded_not_raised(
        self, client, admin_auth_token, test_post, db_session
    ) -> None:
        post_id = test_post.id
        real_commit = db_session.commit
        calls = {"n": 0}

        def flaky_commit():
            calls["n"] += 1
            if calls["n"] == 2:
                raise OperationalError("INSERT INTO admin_action_logs", {}, Exception("locked"))
            return real_commit()

        with patch.object(db_session, "commit", side_effect=flaky_commit):
            response = client.post(
                "/api/v1/delete-post", json={"post_id": post_id}, headers=admin_auth_token
            )

        assert response.status_code == status.HTTP_200_OK
        assert db_session.get(Post, post_id) is None
        assert db_session.query(AdminActionLog).count() == 0
        failure = db_session.query(SecondaryWriteFailure).one()
        assert failure.entity == "admin_action_log"
        assert failure.payload["action"] == "delete_post"


class TestDeleteComment:
    def _comment(self, client, headers, post_id) -> str:
        response = client.post(
            "/api/v1/create-comment", json={"content": "hey", "post_id": post_id}, headers=headers
        )
        return response.json()["id"]

    def test_author_can_delete(self, client, auth_token, test_post, db_session) -> None:
        comment_id = self._comment(client, auth_token, test_post.id)

        response = client.post(
            "/api/v1/delete-comment", json={"comment_id": comment_id}, headers=auth_token
        )

        assert response.status_code == status.HTTP_200_OK
        assert db_session.get(Comment, comment_id) is None

    def test_admin_can_delete(self, client, auth_token, admin_auth_token, test_post, db_session) -> None:
        comment_id = self._comment(client, auth_token, test_post.id)

        response = client.post(
            "/api/v1/delete-comment", json={"comment_id": comment_id}, headers=admin_auth_token
        )

        assert response.status_code == status.HTTP_200_OK

    def test_stranger_is_forbidden(self, client, auth_token, other_auth_token, test_post) -> None:
        comment_id = self._comment(client, auth_token, test_post.id)

        response = client.post(
            "/api/v1/delete-comment", json={"comment_id": comment_id}, headers=other_auth_token
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_comment_is_404(self, client, auth_token) -> None:
        response = client.post(
            "/api/v1/delete-comment", json={"comment_id": "nope"}, headers=auth_token
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Comment not found"}


class TestBanUser:
    def test_non_admin_is_forbidden(self, client, auth_token, other_user, db_session) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": other_user.id, "duration": "10_days"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Forbidden: only admins can ban users"}
        db_session.refresh(other_user)
        assert other_user.is_banned is False

    def test_temporary_ban(self, client, admin_auth_token, admin_user, test_user, db_session) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": test_user.id, "duration": "10_days"},
            headers=admin_auth_token,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["is_permanently_banned"] is False
        assert data["banned_until"] is not None

        profile = db_session.get(Profile, test_user.id)
        db_session.refresh(profile)
        assert profile.is_banned is True
        assert profile.banned_until is not None

        entry = db_session.query(AdminActionLog).one()
        assert entry.action == "ban"
        assert entry.admin_id == admin_user.id
        assert entry.metadata_ == {"duration": "10_days"}

    def test_permanent_ban_has_no_end(self, client, admin_auth_token, test_user) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": test_user.id, "duration": "permanent"},
            headers=admin_auth_token,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_permanently_banned"] is True
        assert response.json()["banned_until"] is None

    def test_cannot_ban_yourself(self, client, admin_auth_token, admin_user) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": admin_user.id, "duration": "1_year"},
            headers=admin_auth_token,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "You cannot ban yourself"}

    def test_invalid_duration(self, client, admin_auth_token, test_user) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": test_user.id, "duration": "forever"},
            headers=admin_auth_token,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "error": "duration must be one of: 10_days, 1_month, 1_year, permanent"
        }

    def test_unknown_user_is_404(self, client, admin_auth_token) -> None:
        response = client.post(
            "/api/v1/ban-user",
            json={"user_id": "ghost", "duration": "1_month"},
            headers=admin_auth_token,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUnbanUser:
    def test_unban_clears_columns(self, client, admin_auth_token, test_user, db_session) -> None:
        client.post(
            "/api/v1/ban-user",
            json={"user_id": test_user.id, "duration": "permanent"},
            headers=admin_auth_token,
        )

        response = client.post(
            "/api/v1/unban-user", json={"user_id": test_user.id}, headers=admin_auth_token
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        profile = db_session.get(Profile, test_user.id)
        db_session.refresh(profile)
        assert profile.is_banned is False
        assert profile.is_permanently_banned is False
        assert profile.banned_until is None
        actions = [entry.action for entry in db_session.query(AdminActionLog).all()]
        assert sorted(actions) == ["ban", "unban"]

    def test_non_admin_is_forbidden(self, client, auth_token, other_user) -> None:
        response = client.post(
            "/api/v1/unban-user", json={"user_id": other_user.id}, headers=auth_token
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Forbidden: only admins can unban users"}

    def test_user_id_required(self, client, admin_auth_token) -> None:
        response = client.post("/api/v1/unban-user", json={}, headers=admin_auth_token)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "user_id is required"}
