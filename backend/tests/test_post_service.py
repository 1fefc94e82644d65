"""
Murmur Backend — Post Service Unit Tests
==========================================

What:  PostService business rules against a mocked session.
How:   No database: `mock_db_session` stands in for AsyncSession and real
       (transient) ORM objects are used as query results.

What we test:
    ✅ Blank content is rejected before anything is added
    ✅ Attachment fields are copied from the upload, or all left None
    ✅ Insert failure rolls back and surfaces as DatabaseError
    ✅ Download of a post without a file is NotFoundError
    ✅ Delete: 404 before 403, counts from the bulk deletes, rollback on failure
"""

import base64
import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from app.models import Like, Post
from app.services.post_service import PostService, is_liked_by
from app.services.upload_service import UploadedFile


def _result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.one_or_none.return_value = value
    return result


def _post(author_id, **fields):
    return Post(
        id=uuid.uuid4(),
        content=fields.pop("content", "hello"),
        author_id=author_id,
        created_at=datetime.now(timezone.utc),
        **fields,
    )


class TestCreatePost:

    def setup_method(self):
        self.service = PostService()
        self.author_id = uuid.uuid4()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   \n\t"])
    async def test_blank_content_rejected(self, mock_db_session, content):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_post(mock_db_session, self.author_id, content)

        assert exc_info.value.message == "Content is required"
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text_only_post_has_no_file_fields(self, mock_db_session):
        result = await self.service.create_post(mock_db_session, self.author_id, "hi there")

        assert result.content == "hi there"
        assert result.author_id == self.author_id
        assert result.file_data is None
        assert result.file_name is None
        assert result.file_type is None
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upload_fields_are_stored_together(self, mock_db_session):
        upload = UploadedFile(buffer=b"\x89PNG data", original_name="cat.png", mime_type="image/png")

        result = await self.service.create_post(
            mock_db_session, self.author_id, "look", upload
        )

        stored = mock_db_session.add.call_args[0][0]
        assert stored.file_data == b"\x89PNG data"
        assert stored.file_name == "cat.png"
        assert stored.file_type == "image/png"
        assert result.file_data == base64.b64encode(b"\x89PNG data").decode("ascii")

    @pytest.mark.asyncio
    async def test_insert_failure_rolls_back(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError("INSERT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.create_post(mock_db_session, self.author_id, "hi")

        mock_db_session.rollback.assert_awaited_once()


class TestGetPostFile:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_returns_stored_attachment(self, mock_db_session):
        row = MagicMock(file_data=b"abc", file_name="a.txt", file_type="text/plain")
        mock_db_session.execute.return_value = _result(row)

        attachment = await self.service.get_post_file(mock_db_session, str(uuid.uuid4()))

        assert attachment.data == b"abc"
        assert attachment.filename == "a.txt"
        assert attachment.content_type == "text/plain"

    @pytest.mark.asyncio
    async def test_post_without_file_is_not_found(self, mock_db_session):
        row = MagicMock(file_data=None, file_name=None, file_type=None)
        mock_db_session.execute.return_value = _result(row)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_post_file(mock_db_session, str(uuid.uuid4()))
        assert exc_info.value.message == "File not found"

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_post_file(mock_db_session, "not-a-uuid")
        mock_db_session.execute.assert_not_awaited()


class TestDeletePost:

    def setup_method(self):
        self.service = PostService()
        self.owner_id = uuid.uuid4()

    @pytest.mark.asyncio
    async def test_missing_post(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_post(mock_db_session, str(uuid.uuid4()), self.owner_id)

    @pytest.mark.asyncio
    async def test_non_author_forbidden_and_nothing_deleted(self, mock_db_session):
        post = _post(self.owner_id)
        mock_db_session.execute.return_value = _result(post)

        with pytest.raises(ForbiddenError):
            await self.service.delete_post(mock_db_session, str(post.id), uuid.uuid4())

        # Only the lookup ran
        assert mock_db_session.execute.await_count == 1
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_returns_deleted_counts_and_post(self, mock_db_session):
        post = _post(self.owner_id, content="bye")
        mock_db_session.execute.side_effect = [
            _result(post),
            MagicMock(rowcount=3),
            MagicMock(rowcount=2),
            MagicMock(rowcount=1),
        ]

        result = await self.service.delete_post(mock_db_session, str(post.id), self.owner_id)

        assert result.deleted_comments == 3
        assert result.deleted_likes == 2
        assert result.post.id == post.id
        assert result.post.content == "bye"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_mid_transaction_rolls_back(self, mock_db_session):
        post = _post(self.owner_id)
        mock_db_session.execute.side_effect = [
            _result(post),
            MagicMock(rowcount=1),
            OperationalError("DELETE", {}, Exception("locked")),
        ]

        with pytest.raises(DatabaseError):
            await self.service.delete_post(mock_db_session, str(post.id), self.owner_id)

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()


def test_is_liked_by():
    me, someone = uuid.uuid4(), uuid.uuid4()
    likes = [Like(user_id=someone, post_id=uuid.uuid4())]

    assert is_liked_by(likes, someone)
    assert not is_liked_by(likes, me)
    assert not is_liked_by([], me)
