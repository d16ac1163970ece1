import logging
from typing import List, Optional

from ..errors import ProcedureError
from ..schemas.tag import Tag, TagCreate, TagUpdate
from .api import TaskBoardClient
from .cache import QueryCache
from .forms import build
from .notifications import NotificationCenter

logger = logging.getLogger(__name__)


class TagManager:
    """Keeps the tag list and runs tag mutations with user notifications."""

    def __init__(self, client: TaskBoardClient, notifications: Optional[NotificationCenter] = None):
        self.client = client
        self.notifications = notifications or NotificationCenter()
        self.cache: QueryCache[Tag] = QueryCache(client.list_tags)

    @property
    def tags(self) -> List[Tag]:
        return self.cache.get_data() or []

    async def load(self) -> List[Tag]:
        return await self.cache.fetch()

    async def create(self, name: str, color: str) -> Optional[Tag]:
        try:
            tag = await self.client.create_tag(build(TagCreate, name=name, color=color))
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return None
        self.notifications.success("Tag created")
        return tag

    async def update(self, tag_id: str, name: str, color: str) -> Optional[Tag]:
        try:
            tag = await self.client.update_tag(tag_id, build(TagUpdate, name=name, color=color))
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return None
        self.notifications.success("Tag updated")
        return tag

    async def delete(self, tag_id: str) -> bool:
        try:
            await self.client.delete_tag(tag_id)
            await self.cache.invalidate()
        except ProcedureError as exc:
            self.notifications.error(exc.message)
            return False
        self.notifications.success("Tag deleted")
        return True
