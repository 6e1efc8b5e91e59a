"""Unit tests for request/response schemas."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from api.v1.schemas.agency import AgencyCreate, AgencySettingsUpdate, SocialMedia
from api.v1.schemas.invite import CreateInviteRequest, InviteResponse
from api.v1.schemas.submission import ReviewRequest, SubmitVideoRequest
from domain.entities.agency import AgencyRole
from domain.entities.invite import Invite
from domain.entities.submission import Platform


class TestSubmitVideoRequest:
    def test_platform_urls_cover_every_platform(self) -> None:
        body = SubmitVideoRequest(tiktok_url="https://www.tiktok.com/@a/video/1")

        urls = body.platform_urls()

        assert set(urls) == set(Platform)
        assert urls[Platform.TIKTOK] == "https://www.tiktok.com/@a/video/1"
        assert urls[Platform.INSTAGRAM] is None


class TestReviewRequest:
    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_accepts_known_actions(self, action: str) -> None:
        assert ReviewRequest(action=action).action == action

    def test_rejects_unknown_action(self) -> None:
        with pytest.raises(ValidationError):
            ReviewRequest(action="archive")


class TestCreateInviteRequest:
    def test_defaults(self) -> None:
        body = CreateInviteRequest()

        assert body.role == "creator"
        assert body.max_uses is None
        assert body.expires_in_days is None

    def test_owner_role_is_not_allowed(self) -> None:
        with pytest.raises(ValidationError):
            CreateInviteRequest(role="owner")

    @pytest.mark.parametrize("field", ["max_uses", "expires_in_days"])
    def test_rejects_zero(self, field: str) -> None:
        with pytest.raises(ValidationError):
            CreateInviteRequest(**{field: 0})

    def test_email_is_normalized(self) -> None:
        assert CreateInviteRequest(email=" Jane@Example.COM ").email == "jane@example.com"

    def test_bad_email(self) -> None:
        with pytest.raises(ValidationError):
            CreateInviteRequest(email="not-an-email")


class TestAgencySchemas:
    def test_social_handles_drop_empty_values(self) -> None:
        handles = SocialMedia(instagram="@bright", tiktok="").to_handles()
        assert handles == {"instagram": "@bright"}

    def test_create_defaults_to_invite_only_with_approval(self) -> None:
        body = AgencyCreate(name="bright", display_name="Bright")

        assert body.settings.allow_public_join is False
        assert body.settings.require_approval is True
        assert body.create_first_invite is False

    def test_settings_update_only_dumps_given_fields(self) -> None:
        update = AgencySettingsUpdate(allow_public_join=True)
        assert update.model_dump(exclude_unset=True) == {"allow_public_join": True}


class TestInviteResponse:
    def test_role_and_redeemability(self) -> None:
        invite = Invite(
            agency_id=uuid4(),
            invite_code="K7Q2MZ9A",
            created_by=uuid4(),
            role=AgencyRole.ADMIN,
            max_uses=1,
            current_uses=1,
        )

        response = InviteResponse.from_entity(invite)

        assert response.role == "admin"
        assert response.is_active is True
        assert response.is_redeemable is False
