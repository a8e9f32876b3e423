"""
Tests for reply CRUD
"""

import pytest
import pytest_asyncio

from common.errors import ForbiddenException, NotFoundException, ValidationException
from services.board.crud.board_crud import create_post
from services.board.crud.reply_crud import create_reply, delete_reply, list_replies, update_reply
from services.member.crud.member_crud import register_member


@pytest_asyncio.fixture
async def post_no(db, hasher):
    await register_member(db, hasher, "alice", "pw", "앨리스")
    await register_member(db, hasher, "bob", "pw", "밥")
    return await create_post(db, "alice", "제목", "본문")


class TestReplies:

    @pytest.mark.asyncio
    async def test_oldest_first(self, db, post_no):
        first = await create_reply(db, post_no, "bob", "먼저")
        second = await create_reply(db, post_no, "alice", "중간")
        third = await create_reply(db, post_no, "bob", "나중")

        items = await list_replies(db, post_no)

        assert [item["no"] for item in items] == [first, second, third]
        assert [item["reply"] for item in items] == ["먼저", "중간", "나중"]
        dates = [item["rep_date"] for item in items]
        assert dates == sorted(dates)
        assert items[0]["id"] == "bob"
        assert items[0]["nickname"] == "밥"
        assert items[0]["reply"] == "먼저"

    @pytest.mark.asyncio
    async def test_unknown_post_lists_empty(self, db, post_no):
        assert await list_replies(db, post_no + 100) == []

    @pytest.mark.asyncio
    async def test_reply_to_missing_post(self, db, post_no):
        with pytest.raises(NotFoundException):
            await create_reply(db, post_no + 100, "bob", "댓글")

    @pytest.mark.asyncio
    async def test_empty_reply_rejected(self, db, post_no):
        with pytest.raises(ValidationException):
            await create_reply(db, post_no, "bob", "")

    @pytest.mark.asyncio
    async def test_reply_author_can_update(self, db, post_no):
        no = await create_reply(db, post_no, "bob", "원래")

        await update_reply(db, post_no, no, "bob", "수정")

        items = await list_replies(db, post_no)
        assert items[0]["reply"] == "수정"

    @pytest.mark.asyncio
    async def test_post_author_cannot_edit_others_reply(self, db, post_no):
        no = await create_reply(db, post_no, "bob", "원래")

        with pytest.raises(ForbiddenException):
            await update_reply(db, post_no, no, "alice", "수정")
        with pytest.raises(ForbiddenException):
            await delete_reply(db, post_no, no, "alice")

        assert len(await list_replies(db, post_no)) == 1

    @pytest.mark.asyncio
    async def test_mismatched_post_number_is_not_found(self, db, post_no):
        other_post = await create_post(db, "alice", "다른 글", "본문")
        no = await create_reply(db, post_no, "bob", "댓글")

        with pytest.raises(NotFoundException):
            await update_reply(db, other_post, no, "bob", "수정")
        with pytest.raises(NotFoundException):
            await delete_reply(db, other_post, no, "bob")

    @pytest.mark.asyncio
    async def test_reply_author_can_delete(self, db, post_no):
        no = await create_reply(db, post_no, "bob", "댓글")

        await delete_reply(db, post_no, no, "bob")

        assert await list_replies(db, post_no) == []

    @pytest.mark.asyncio
    async def test_delete_missing_reply(self, db, post_no):
        with pytest.raises(NotFoundException):
            await delete_reply(db, post_no, 999, "bob")
