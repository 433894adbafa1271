"""
Blog routes: public reading, admin authoring
"""
import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from .auth import require_admin
from .database import get_db, User, BlogPost
from .exceptions import api_error, send_response
from .middleware.uploads import has_file, save_image
from .services.slug_service import generate_unique_slug
from .services.storage_provider import delete_local_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/blogs", tags=["blogs"])

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")

SLUG_ATTEMPTS = 3


def parse_bool(value: Any) -> Optional[bool]:
    """Form booleans: None when absent or blank"""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return bool(value)


def author_display_name(user: User) -> str:
    return user.full_name or user.user_name or user.email or "Unknown"


async def _cover_field(request: Request):
    """
    The coverImage form field carries either an uploaded file or a URL

    Returns (upload or None, text or None); text is None when the field is absent.
    """
    form = await request.form()
    value = form.get("coverImage")
    if isinstance(value, StarletteUploadFile):
        return (value if has_file(value) else None), None
    return None, value


def _insert_post(db: Session, post: BlogPost, title: str) -> None:
    """Insert, picking a fresh slug if a concurrent insert took this one"""
    for attempt in range(1, SLUG_ATTEMPTS + 1):
        db.add(post)
        try:
            db.commit()
            return
        except IntegrityError:
            db.rollback()
            if attempt == SLUG_ATTEMPTS:
                raise
            logger.warning(f"Slug {post.slug} taken on insert, retrying")
            post.slug = generate_unique_slug(db, title)


def _get_post(db: Session, post_id: str) -> BlogPost:
    post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
    if post is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "Blog post not found")
    return post


@router.get("")
async def list_published_posts(db: Session = Depends(get_db)):
    posts = (
        db.query(BlogPost)
        .filter(BlogPost.is_published.is_(True))
        .order_by(BlogPost.published_at.desc())
        .all()
    )
    return send_response(status.HTTP_200_OK, "Blog posts retrieved", [post.to_summary() for post in posts])


@router.get("/admin")
async def list_all_posts(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Drafts included"""
    posts = db.query(BlogPost).order_by(BlogPost.created_at.desc()).all()
    return send_response(status.HTTP_200_OK, "Blog posts retrieved", [post.to_dict() for post in posts])


@router.get("/{slug}")
async def get_post_by_slug(slug: str, db: Session = Depends(get_db)):
    """Published post by slug; each read counts as a view"""
    post = db.query(BlogPost).filter(BlogPost.slug == slug, BlogPost.is_published.is_(True)).first()
    if post is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "Blog post not found")

    db.query(BlogPost).filter(BlogPost.id == post.id).update(
        {BlogPost.views: BlogPost.views + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(post)
    return send_response(status.HTTP_200_OK, "Blog post retrieved", post.to_dict())


@router.post("")
async def create_post(
    request: Request,
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    is_published: Optional[str] = Form(None, alias="isPublished"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Create a post

    The cover is an uploaded file or an image URL; posts are published
    unless isPublished says otherwise.
    """
    if not title or not content:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Title and content are required")

    upload, cover_url = await _cover_field(request)
    if upload is not None:
        cover_image = await save_image(upload, "blogs")
    else:
        cover_image = (cover_url or "").strip() or None

    published = parse_bool(is_published)
    if published is None:
        published = True

    post = BlogPost(
        title=title,
        slug=generate_unique_slug(db, title),
        excerpt=(excerpt or "").strip() or None,
        content=content,
        cover_image=cover_image,
        is_published=published,
        published_at=datetime.utcnow() if published else None,
        author_id=admin.id,
        author_name=author_display_name(admin),
    )
    _insert_post(db, post, title)
    db.refresh(post)
    logger.info(f"Blog post {post.slug} created by {admin.id}")
    return send_response(status.HTTP_200_OK, "Blog post created successfully", post.to_dict())


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    request: Request,
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    author_name: Optional[str] = Form(None, alias="authorName"),
    is_published: Optional[str] = Form(None, alias="isPublished"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Partial update

    A blank coverImage clears the cover; a new file or URL replaces it.
    Locally stored covers are removed from disk when replaced.
    """
    post = _get_post(db, post_id)

    if title:
        post.title = title
        post.slug = generate_unique_slug(db, title, exclude_id=post.id)
    if excerpt is not None:
        post.excerpt = excerpt.strip() or None
    if content is not None:
        post.content = content

    old_cover = post.cover_image
    upload, cover_url = await _cover_field(request)
    if upload is not None:
        post.cover_image = await save_image(upload, "blogs")
    elif cover_url is not None:
        post.cover_image = cover_url.strip() or None

    if author_name:
        post.author_name = author_name

    published = parse_bool(is_published)
    if published is not None:
        post.is_published = published
        if published and post.published_at is None:
            post.published_at = datetime.utcnow()
        if not published:
            post.published_at = None

    db.commit()
    if post.cover_image != old_cover:
        delete_local_upload("blogs", old_cover)
    db.refresh(post)
    return send_response(status.HTTP_200_OK, "Blog post updated", post.to_dict())


@router.delete("/{post_id}")
async def delete_post(post_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    post = _get_post(db, post_id)
    cover_image = post.cover_image

    db.delete(post)
    db.commit()
    delete_local_upload("blogs", cover_image)
    logger.info(f"Blog post {post_id} deleted by {admin.id}")
    return send_response(status.HTTP_200_OK, "Blog post deleted")
