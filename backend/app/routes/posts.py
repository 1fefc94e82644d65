"""
Murmur Backend — Post Route Handlers
======================================

What:  /posts endpoints: create, feed, detail, attachment download, delete.
How:   Thin handlers. Authentication comes from `CurrentUserId`, the session
       from `DbSession`; everything else is delegated to PostService.

Endpoints:
    POST   /posts             multipart form: content (required), file (optional)
    GET    /posts             every post, newest first
    GET    /posts/{id}        one post with comment authors
    GET    /posts/{id}/file   raw attachment bytes
    DELETE /posts/{id}        author only; removes comments and likes too
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, Response, UploadFile

from app.dependencies import CurrentUserId, DbSession
from app.schemas.common import ErrorResponse
from app.schemas.post import PostDeleteResponse, PostDetail, PostFeedItem, PostResponse
from app.services.post_service import post_service
from app.services.upload_service import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_AUTH_ERRORS = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Post not found", "model": ErrorResponse}}


def content_disposition(filename: str) -> str:
    """
    Build an `attachment` Content-Disposition value for `filename`.

    The stored name is used as given. The quoted `filename` parameter gets an
    ASCII copy without control characters, quotes or backslashes; any name
    that differs from its percent-encoding also gets an RFC 5987 `filename*`
    parameter carrying the exact name.
    """
    printable = "".join(ch for ch in filename if ch >= " " and ch not in '"\\\x7f')
    fallback = printable.encode("ascii", "replace").decode("ascii").replace("?", "_") or "file"
    value = f'attachment; filename="{fallback}"'
    quoted = quote(filename, safe="")
    if quoted != filename:
        value += f"; filename*=UTF-8''{quoted}"
    return value


@router.post(
    "",
    response_model=PostResponse,
    responses={
        400: {"description": "Missing content or invalid file", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Create a post",
)
async def create_post(
    user_id: CurrentUserId,
    db: DbSession,
    content: Optional[str] = Form(None, description="Post text"),
    file: Optional[UploadFile] = File(None, description="Optional attachment"),
) -> PostResponse:
    """
    Create a post authored by the caller, optionally with one attachment.

    The file is read fully into memory and stored with the post.
    """
    upload = await upload_service.read_upload(file)
    return await post_service.create_post(db, user_id, content, upload)


@router.get(
    "",
    response_model=List[PostFeedItem],
    responses=_AUTH_ERRORS,
    summary="List all posts",
)
async def list_posts(user_id: CurrentUserId, db: DbSession) -> List[PostFeedItem]:
    return await post_service.list_posts(db, user_id)


@router.get(
    "/{post_id}",
    response_model=PostDetail,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Get a single post",
)
async def get_post(post_id: str, user_id: CurrentUserId, db: DbSession) -> PostDetail:
    return await post_service.get_post(db, post_id, user_id)


@router.get(
    "/{post_id}/file",
    response_class=Response,
    responses={
        200: {"description": "Attachment bytes with their stored MIME type"},
        **_AUTH_ERRORS,
        404: {"description": "Post or file not found", "model": ErrorResponse},
    },
    summary="Download a post's attachment",
)
async def download_post_file(post_id: str, user_id: CurrentUserId, db: DbSession) -> Response:
    attachment = await post_service.get_post_file(db, post_id)
    return Response(
        content=attachment.data,
        media_type=attachment.content_type,
        headers={"Content-Disposition": content_disposition(attachment.filename)},
    )


@router.delete(
    "/{post_id}",
    response_model=PostDeleteResponse,
    responses={
        **_AUTH_ERRORS,
        403: {"description": "Caller is not the author", "model": ErrorResponse},
        **_NOT_FOUND,
    },
    summary="Delete a post with its comments and likes",
)
async def delete_post(
    post_id: str, user_id: CurrentUserId, db: DbSession
) -> PostDeleteResponse:
    return await post_service.delete_post(db, post_id, user_id)
