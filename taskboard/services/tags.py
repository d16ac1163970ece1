"""Tag procedures. Tags form one vocabulary shared by all users."""
import logging
from datetime import datetime, timezone
from typing import List

from ..context import RequestContext
from ..database import storage_errors, transaction
from ..errors import NotFound
from ..models import Tag, TaskTagLink
from ..schemas.tag import TagCreate, TagUpdate

logger = logging.getLogger(__name__)


def _get_tag(ctx: RequestContext, tag_id: str) -> Tag:
    tag = ctx.db.get(Tag, tag_id)
    if tag is None:
        raise NotFound("Tag not found")
    return tag


def list_tags(ctx: RequestContext) -> List[Tag]:
    with storage_errors(ctx.db, "Failed to load tags"):
        return ctx.db.query(Tag).order_by(Tag.name.asc()).all()


def create_tag(ctx: RequestContext, data: TagCreate) -> Tag:
    tag = Tag(name=data.name, color=data.color)
    with transaction(ctx.db, "Failed to create tag"):
        ctx.db.add(tag)
    ctx.db.refresh(tag)
    logger.info("Created tag %s (%s)", tag.id, tag.name)
    return tag


def update_tag(ctx: RequestContext, tag_id: str, data: TagUpdate) -> Tag:
    with transaction(ctx.db, "Failed to update tag"):
        tag = _get_tag(ctx, tag_id)
        tag.name = data.name
        tag.color = data.color
        tag.updated_at = datetime.now(timezone.utc)
    ctx.db.refresh(tag)
    return tag


def delete_tag(ctx: RequestContext, tag_id: str) -> None:
    """Remove the tag from every task, then delete it, in one transaction."""
    with transaction(ctx.db, "Failed to delete tag"):
        tag = _get_tag(ctx, tag_id)
        unlinked = (
            ctx.db.query(TaskTagLink)
            .filter(TaskTagLink.tag_id == tag_id)
            .delete(synchronize_session=False)
        )
        ctx.db.delete(tag)
    logger.info("Deleted tag %s (unlinked from %d tasks)", tag_id, unlinked)
