"""
Main Blog Backend — Blog Service
==================================

What:  Create, list, search, update and delete blog posts.
How:   Each operation is one or two ORM queries on the `blogs` table; the
       optional image goes through FileService.
Who:   Called by the /blogs route handlers.

Error Handling Strategy:
    Presence checks raise ValidationError (400), unknown ids raise
    NotFoundError (404). Every other failure is logged with its traceback and
    re-raised as DatabaseError carrying the operation's user-facing message.
    Uploads are written only after the text fields pass and the target blog
    exists; if the flush fails afterwards the new file is removed again.

No operation checks who is asking: any caller that knows an id can update or
delete that blog.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mainblog.exceptions import (
    DatabaseError,
    MainBlogError,
    NotFoundError,
    ValidationError,
)
from mainblog.models.blog import Blog
from mainblog.schemas.blog import (
    BlogEnvelope,
    BlogForm,
    BlogListResponse,
    BlogResponse,
    ImageUpload,
)
from mainblog.schemas.common import MessageResponse
from mainblog.services.file_service import file_service

logger = logging.getLogger(__name__)

CASE_INSENSITIVE = "(?i)"


def _parse_blog_id(blog_id: str) -> Optional[uuid.UUID]:
    """Return the UUID for a path id, or None when it cannot name any blog."""
    try:
        return uuid.UUID(blog_id)
    except (ValueError, AttributeError, TypeError):
        return None


def _require_fields(form: BlogForm) -> None:
    missing = form.missing_fields()
    if missing:
        raise ValidationError(
            message="Please fill all the required fields",
            context={"missing": missing},
        )


def _to_list_response(blogs: List[Blog]) -> BlogListResponse:
    return BlogListResponse(blogs=[BlogResponse.model_validate(b) for b in blogs])


class BlogService:
    """
    Business logic layer for blog posts.

    Responsibilities:
        - create_blog(): presence check → store image → insert
        - list_blogs(): all blogs, or exact author match
        - search_blogs(): all blogs, or case-insensitive title regex
        - update_blog(): presence check → lookup → store image → overwrite
        - delete_blog(): lookup → delete
    """

    async def create_blog(
        self,
        db: AsyncSession,
        form: BlogForm,
        image: Optional[ImageUpload] = None,
    ) -> BlogEnvelope:
        """
        Insert a new blog.

        Raises:
            ValidationError: title, content, author or category empty (→ 400)
            FileStorageError: the image could not be written (→ 500)
            DatabaseError: insert failed (→ 500)
        """
        _require_fields(form)

        stored_path: Optional[str] = None
        try:
            image_url = None
            if image is not None:
                stored_path, image_url = await file_service.store_upload(
                    image.filename, image.content
                )

            blog = Blog(
                title=form.title,
                content=form.content,
                author=form.author,
                category=form.category,
                external_link=form.external_link or None,
                image=image_url,
            )
            db.add(blog)
            await db.flush()
            logger.info("Blog created: %s by %s", blog.id, blog.author)

            return BlogEnvelope(
                message="Blog created successfully",
                blog=BlogResponse.model_validate(blog),
            )

        except MainBlogError:
            raise
        except Exception as e:
            if stored_path:
                await file_service.cleanup_file(stored_path)
            logger.error("Error creating blog: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error creating blog, please try again",
                context={"error_type": type(e).__name__},
            )

    async def list_blogs(self, db: AsyncSession, username: Optional[str] = None) -> BlogListResponse:
        """
        List blogs, optionally restricted to one author.

        Query plan:
            SELECT * FROM blogs [WHERE author = :username]
            No ORDER BY and no LIMIT: natural store order, every row.
        """
        try:
            query = select(Blog)
            if username:
                query = query.where(Blog.author == username)

            result = await db.execute(query)
            return _to_list_response(list(result.scalars().all()))

        except Exception as e:
            logger.error("Error fetching blogs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching blogs",
                context={"error_type": type(e).__name__},
            )

    async def search_blogs(self, db: AsyncSession, title: Optional[str] = None) -> BlogListResponse:
        """
        Search blogs by title.

        `title` is used as a case-insensitive regular expression, unescaped:
        plain text behaves as a substring match, metacharacters keep their
        regex meaning. An expression the store rejects surfaces as a 500.
        """
        try:
            query = select(Blog)
            if title:
                # SQLite REGEXP takes no flags argument; inline (?i) is read by
                # both PostgreSQL AREs and the Python re function behind it
                query = query.where(Blog.title.regexp_match(CASE_INSENSITIVE + title))

            result = await db.execute(query)
            return _to_list_response(list(result.scalars().all()))

        except Exception as e:
            logger.error("Error searching blogs for %r: %s", title, str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching blogs",
                context={"error_type": type(e).__name__},
            )

    async def update_blog(
        self,
        db: AsyncSession,
        blog_id: str,
        form: BlogForm,
        image: Optional[ImageUpload] = None,
    ) -> BlogEnvelope:
        """
        Overwrite an existing blog.

        The four required fields and externalLink are always replaced; an
        empty externalLink clears the stored one. The image is replaced only
        when a new file is uploaded.

        Raises:
            ValidationError: a required field is empty (→ 400)
            NotFoundError: no blog with this id (→ 404)
            DatabaseError: query or flush failed (→ 500)
        """
        _require_fields(form)

        stored_path: Optional[str] = None
        try:
            blog = await self._get_blog(db, blog_id)

            if image is not None:
                stored_path, image_url = await file_service.store_upload(
                    image.filename, image.content
                )
                blog.image = image_url

            blog.title = form.title
            blog.content = form.content
            blog.author = form.author
            blog.category = form.category
            blog.external_link = form.external_link or None

            await db.flush()
            logger.info("Blog updated: %s", blog.id)

            return BlogEnvelope(
                message="Blog updated successfully",
                blog=BlogResponse.model_validate(blog),
            )

        except MainBlogError:
            raise
        except Exception as e:
            if stored_path:
                await file_service.cleanup_file(stored_path)
            logger.error("Error updating blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating blog, please try again",
                context={"blog_id": blog_id, "error_type": type(e).__name__},
            )

    async def delete_blog(self, db: AsyncSession, blog_id: str) -> MessageResponse:
        """
        Delete a blog by id. The uploaded image, if any, stays on disk.

        Raises:
            NotFoundError: no blog with this id (→ 404)
            DatabaseError: query or delete failed (→ 500)
        """
        try:
            blog = await self._get_blog(db, blog_id)
            await db.delete(blog)
            await db.flush()
            logger.info("Blog deleted: %s", blog_id)
            return MessageResponse(message="Blog deleted successfully")

        except MainBlogError:
            raise
        except Exception as e:
            logger.error("Error deleting blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting blog",
                context={"blog_id": blog_id, "error_type": type(e).__name__},
            )

    async def _get_blog(self, db: AsyncSession, blog_id: str) -> Blog:
        """Primary-key lookup; NotFoundError for unknown or malformed ids."""
        parsed = _parse_blog_id(blog_id)
        blog = await db.get(Blog, parsed) if parsed is not None else None
        if blog is None:
            raise NotFoundError(resource="Blog", resource_id=blog_id)
        return blog


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
