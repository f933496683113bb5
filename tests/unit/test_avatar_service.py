"""Unit tests for the avatar catalog, custom avatars and talking-avatar clips."""

import base64

import pytest
from models.avatar import AvatarStyle
from models.catalog import DEFAULT_AVATAR_VIDEO, SYSTEM_AVATARS
from services.avatar_service import AvatarService
from utils.errors import NotFoundError, UpstreamServiceError, ValidationError


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def avatar_service(fake_tts, sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    return AvatarService(tts_service=fake_tts, max_upload_mb=1, sleep=fake_sleep)


@pytest.mark.unit
class TestCatalog:
    def test_system_avatars(self, avatar_service):
        avatars = avatar_service.list_avatars()

        assert [a.name for a in avatars] == ["Anna", "David", "Sarah", "James", "Yuki"]
        assert avatars[4].style == AvatarStyle.ANIME
        assert avatars[4].preview_video_url is None

    def test_to_dict_uses_camel_case(self):
        data = SYSTEM_AVATARS[0].to_dict()

        assert data["imageUrl"].startswith("https://images.pexels.com/photos/415829/")
        assert data["style"] == "realistic"
        assert data["gender"] == "Female"
        assert "previewVideoUrl" in data

    def test_get_avatar(self, avatar_service):
        assert avatar_service.get_avatar("james").name == "James"
        assert avatar_service.get_avatar("missing") is None


@pytest.mark.unit
class TestCreateUserAvatar:
    @pytest.mark.asyncio
    async def test_upload_becomes_data_url_avatar(self, avatar_service, sleeps):
        avatar = await avatar_service.create_user_avatar("me.jpg", "image/jpeg", b"JPEGDATA", True)

        assert avatar.id.startswith("user-avatar-")
        assert avatar.name == "Custom Avatar"
        assert avatar.gender == "Female"
        assert avatar.style == AvatarStyle.REALISTIC
        assert avatar.image_url == "data:image/jpeg;base64," + base64.b64encode(b"JPEGDATA").decode()
        assert sleeps == [1.0]
        assert avatar_service.list_avatars()[-1] is avatar
        assert avatar_service.get_avatar(avatar.id) is avatar

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, avatar_service):
        first = await avatar_service.create_user_avatar("a.png", "image/png", b"a", True)
        second = await avatar_service.create_user_avatar("b.png", "image/png", b"b", True)

        assert first.id != second.id
        assert len(avatar_service.list_avatars()) == len(SYSTEM_AVATARS) + 2

    @pytest.mark.asyncio
    async def test_video_upload_accepted(self, avatar_service):
        avatar = await avatar_service.create_user_avatar("me.webm", "video/webm", b"clip", True)
        assert avatar.image_url.startswith("data:video/webm;base64,")

    @pytest.mark.asyncio
    async def test_requires_legal_confirmation(self, avatar_service, sleeps):
        with pytest.raises(ValidationError, match="legal ownership"):
            await avatar_service.create_user_avatar("me.png", "image/png", b"png", False)
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_size_limit(self, avatar_service):
        limit = avatar_service.max_upload_bytes

        with pytest.raises(ValidationError) as exc_info:
            await avatar_service.create_user_avatar("big.png", "image/png", b"\x00" * (limit + 1), True)
        assert exc_info.value.status_code == 413

        avatar = await avatar_service.create_user_avatar("exact.png", "image/png", b"\x00" * limit, True)
        assert avatar.id.startswith("user-avatar-")

    @pytest.mark.asyncio
    async def test_rejects_empty_and_non_media(self, avatar_service):
        with pytest.raises(ValidationError, match="Empty upload"):
            await avatar_service.create_user_avatar("none.png", "image/png", b"", True)
        with pytest.raises(ValidationError, match="file type"):
            await avatar_service.create_user_avatar("doc.pdf", "application/pdf", b"%PDF", True)


@pytest.mark.unit
class TestTalkingAvatar:
    @pytest.mark.asyncio
    async def test_resolves_to_preview_clip_after_delay(self, avatar_service, fake_tts, sleeps):
        generation = await avatar_service.generate_talking_avatar("sarah", "Welcome back.", "Kore")

        assert generation.status == "completed"
        assert generation.video_url == SYSTEM_AVATARS[2].preview_video_url
        assert generation.audio_url == "data:audio/wav;base64,UklGRg=="
        assert fake_tts.calls == [("Welcome back.", "Kore")]
        assert sleeps == [4.0]
        assert generation.to_dict()["avatarId"] == "sarah"

    @pytest.mark.asyncio
    async def test_avatar_without_preview_uses_default_clip(self, avatar_service):
        generation = await avatar_service.generate_talking_avatar("anime_girl", "Konnichiwa.", "Zephyr")
        assert generation.video_url == DEFAULT_AVATAR_VIDEO

    @pytest.mark.asyncio
    async def test_custom_avatar_uses_default_clip(self, avatar_service):
        avatar = await avatar_service.create_user_avatar("me.png", "image/png", b"png", True)

        generation = await avatar_service.generate_talking_avatar(avatar.id, "It's me.", "Puck")

        assert generation.video_url == DEFAULT_AVATAR_VIDEO

    @pytest.mark.asyncio
    async def test_without_tts_there_is_no_audio(self):
        service = AvatarService(render_delay=0)

        generation = await service.generate_talking_avatar("anna", "Silent film.", "Puck")

        assert generation.audio_url is None
        assert "audioUrl" not in generation.to_dict()
        assert generation.video_url == SYSTEM_AVATARS[0].preview_video_url

    @pytest.mark.asyncio
    async def test_validation(self, avatar_service, fake_tts):
        with pytest.raises(ValidationError):
            await avatar_service.generate_talking_avatar("anna", "   ", "Puck")
        with pytest.raises(ValidationError, match="Unknown voice"):
            await avatar_service.generate_talking_avatar("anna", "Hi", "Nobody")
        with pytest.raises(NotFoundError):
            await avatar_service.generate_talking_avatar("ghost", "Hi", "Puck")
        assert fake_tts.calls == []

    @pytest.mark.asyncio
    async def test_narration_failure_propagates(self, avatar_service, fake_tts, sleeps):
        fake_tts.fail_on = ("quota",)

        with pytest.raises(UpstreamServiceError):
            await avatar_service.generate_talking_avatar("anna", "Burn the quota.", "Puck")
        assert sleeps == []
