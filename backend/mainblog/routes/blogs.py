"""
Main Blog Backend — Blog Route Handlers
=========================================

What:  CRUD endpoints for blog posts under /blogs.
How:   Multipart form fields are collected into a BlogForm; an optional
       `image` file is read into memory and passed to BlogService.
Who:   Called by the frontend's editor, dashboard and search views.

Request Flow (create/update):
    1. Client sends multipart/form-data (title, content, author, category,
       externalLink?, image?)
    2. Text fields are passed through untouched; missing ones become ""
    3. BlogService checks presence, stores the image, writes the row
    4. 200 with {message, blog}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from mainblog.database import get_db_session
from mainblog.schemas.blog import BlogEnvelope, BlogForm, BlogListResponse, ImageUpload
from mainblog.schemas.common import ErrorResponse, MessageResponse
from mainblog.services.blog_service import blog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["Blogs"])


def blog_form(
    title: str = Form(default=""),
    content: str = Form(default=""),
    author: str = Form(default="", description="Username of the writer (not verified)"),
    category: str = Form(default=""),
    external_link: Optional[str] = Form(default=None, alias="externalLink"),
) -> BlogForm:
    """Dependency collecting the text fields shared by create and update."""
    return BlogForm(
        title=title,
        content=content,
        author=author,
        category=category,
        external_link=external_link,
    )


async def read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    """
    Read an optional upload into memory.

    Browsers send an empty file part with no filename when nothing was
    chosen; that counts as no upload.
    """
    if image is None or not image.filename:
        return None
    try:
        content = await image.read()
    finally:
        await image.close()
    logger.info("Received image upload: filename=%s, size=%d bytes", image.filename, len(content))
    return ImageUpload(filename=image.filename, content=content)


@router.post(
    "/create",
    response_model=BlogEnvelope,
    responses={
        400: {"description": "A required field is missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a blog post",
)
async def create_blog(
    form: BlogForm = Depends(blog_form),
    image: Optional[UploadFile] = File(default=None, description="Optional cover image"),
    db: AsyncSession = Depends(get_db_session),
) -> BlogEnvelope:
    upload = await read_image(image)
    return await blog_service.create_blog(db=db, form=form, image=upload)


@router.get(
    "",
    response_model=BlogListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List blogs, optionally by author",
)
async def list_blogs(
    username: Optional[str] = Query(
        default=None,
        description="Only blogs whose author equals this value exactly",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> BlogListResponse:
    return await blog_service.list_blogs(db=db, username=username)


@router.get(
    "/search",
    response_model=BlogListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Search blogs by title",
    description=(
        "Case-insensitive match of `title` against blog titles. The value is "
        "interpreted as a regular expression, so plain text matches substrings."
    ),
)
async def search_blogs(
    title: Optional[str] = Query(default=None, description="Title pattern"),
    db: AsyncSession = Depends(get_db_session),
) -> BlogListResponse:
    return await blog_service.search_blogs(db=db, title=title)


@router.put(
    "/update/{blog_id}",
    response_model=BlogEnvelope,
    responses={
        400: {"description": "A required field is missing", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Replace a blog's fields",
)
async def update_blog(
    blog_id: str,
    form: BlogForm = Depends(blog_form),
    image: Optional[UploadFile] = File(default=None, description="Replacement image"),
    db: AsyncSession = Depends(get_db_session),
) -> BlogEnvelope:
    upload = await read_image(image)
    return await blog_service.update_blog(db=db, blog_id=blog_id, form=form, image=upload)


@router.delete(
    "/{blog_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Blog not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a blog",
)
async def delete_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await blog_service.delete_blog(db=db, blog_id=blog_id)
