from typing import List

from fastapi import APIRouter, Depends, status

from ..context import RequestContext, get_context
from ..schemas.tag import SuccessResponse, Tag as TagSchema, TagCreate, TagUpdate
from ..services import tags as tag_service

router = APIRouter()


@router.get("/tags", response_model=List[TagSchema])
def list_tags(ctx: RequestContext = Depends(get_context)):
    """List all tags by name."""
    return tag_service.list_tags(ctx)


@router.post("/tags", response_model=TagSchema, status_code=status.HTTP_201_CREATED)
def create_tag(tag: TagCreate, ctx: RequestContext = Depends(get_context)):
    return tag_service.create_tag(ctx, tag)


@router.put("/tags/{tag_id}", response_model=TagSchema)
def update_tag(tag_id: str, tag: TagUpdate, ctx: RequestContext = Depends(get_context)):
    return tag_service.update_tag(ctx, tag_id, tag)


@router.delete("/tags/{tag_id}", response_model=SuccessResponse)
def delete_tag(tag_id: str, ctx: RequestContext = Depends(get_context)):
    """Delete a tag after detaching it from every task."""
    tag_service.delete_tag(ctx, tag_id)
    return SuccessResponse()
