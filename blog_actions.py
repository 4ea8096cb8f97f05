"""
Blog store actions (blogs.json)
"""
import logging
import re
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from database import StoreWriteError, blogs_store
from schemas import ActionResult, BlogPost, BlogPostForm

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "content", "author_name", "category")


def generate_slug(title: str) -> str:
    """URL-friendly slug for a title.

    Lowercases, drops everything but ASCII letters, digits, spaces and
    hyphens (underscores become spaces), turns whitespace runs into single
    hyphens and trims hyphens from the ends.
    Titles with nothing usable get a random ``post-...`` slug.
    """
    slug = (title or "").lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug.replace("_", " "), flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug).strip("-")
    if not slug:
        return f"post-{int(time.time() * 1000):x}{secrets.token_hex(3)}"
    return slug


def unique_slug(base: str, posts: List[Dict[str, Any]], exclude_id: Optional[str] = None) -> str:
    taken = {p.get("slug") for p in posts if p.get("id") != exclude_id}
    slug, suffix = base, 1
    while slug in taken:
        suffix += 1
        slug = f"{base}-{suffix}"
    return slug


def parse_tags(tags_string: Optional[str]) -> List[str]:
    return [t.strip() for t in (tags_string or "").split(",") if t.strip()]


def _to_posts(docs: List[Dict[str, Any]]) -> List[BlogPost]:
    posts = []
    for doc in docs:
        try:
            posts.append(BlogPost.model_validate(doc))
        except ValidationError as e:
            logger.error("Skipping invalid blog post %r: %s", doc.get("slug"), e)
    return posts


def get_blog_posts(only_published: bool = False) -> List[BlogPost]:
    posts = sorted(_to_posts(blogs_store.read()), key=lambda p: _timestamp(p.created_at), reverse=True)
    if only_published:
        return [p for p in posts if p.is_published]
    return posts


def _timestamp(value: str) -> float:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def get_blog_post_by_slug(slug: str) -> Optional[BlogPost]:
    post = get_admin_blog_post_by_slug(slug)
    return post if post and post.is_published else None


def get_admin_blog_post_by_slug(slug: str) -> Optional[BlogPost]:
    return next((p for p in _to_posts(blogs_store.read()) if p.slug == slug), None)


def add_blog_post(form: BlogPostForm) -> ActionResult:
    if any(not getattr(form, field) for field in REQUIRED_FIELDS):
        return ActionResult(success=False, error="Title, content, author, and category are required.")

    with blogs_store.lock:
        docs = blogs_store.read()
        now = datetime.now(timezone.utc).isoformat()
        fields = form.model_dump(exclude={"tags_string", "is_published"}, exclude_none=True)
        post = BlogPost(
            **fields,
            id=f"{int(time.time() * 1000)}{secrets.token_hex(4)}",
            slug=unique_slug(generate_slug(form.title), docs),
            tags=parse_tags(form.tags_string),
            created_at=now,
            updated_at=now,
            is_published=bool(form.is_published),
        )
        docs.append(post.to_store())
        try:
            blogs_store.write(docs)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not add blog post. {e}")
    logger.info("Added blog post %s", post.slug)
    return ActionResult(success=True, data=post)


def update_blog_post(slug: str, form: BlogPostForm) -> ActionResult:
    with blogs_store.lock:
        docs = blogs_store.read()
        index = next((i for i, d in enumerate(docs) if d.get("slug") == slug), None)
        if index is None:
            return ActionResult(success=False, error="Blog post not found.")

        try:
            existing = BlogPost.model_validate(docs[index])
        except ValidationError as e:
            logger.error("Cannot update invalid blog post %r: %s", slug, e)
            return ActionResult(success=False, error="Stored blog post is invalid and cannot be updated.")
        changes = form.model_dump(exclude={"tags_string"}, exclude_unset=True, exclude_none=True)
        for field in REQUIRED_FIELDS:
            if field in changes and not changes[field]:
                return ActionResult(success=False, error="Title, content, author, and category cannot be empty.")
        if form.tags_string is not None:
            changes["tags"] = parse_tags(form.tags_string)
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        if form.title and form.title != existing.title:
            changes["slug"] = unique_slug(generate_slug(form.title), docs, exclude_id=existing.id)

        updated = existing.model_copy(update=changes)
        docs[index] = updated.to_store()
        try:
            blogs_store.write(docs)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not update blog post. {e}")
    return ActionResult(success=True, data=updated)


def delete_blog_post(slug: str) -> ActionResult:
    with blogs_store.lock:
        docs = blogs_store.read()
        remaining = [d for d in docs if d.get("slug") != slug]
        if len(remaining) == len(docs):
            return ActionResult(success=False, error="Blog post not found.")
        try:
            blogs_store.write(remaining)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not delete blog post. {e}")
    return ActionResult(success=True)
