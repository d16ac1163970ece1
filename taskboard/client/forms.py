"""Form models for creating and editing tasks on the client."""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailed, format_validation_errors
from ..models import Priority
from ..schemas.task import Task, TaskCreate, TaskUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

NOON = time(12, 0)


def build(model_cls: Type[ModelT], **fields: Any) -> ModelT:
    """Construct an input schema, reporting bad input as ``ValidationFailed``."""
    try:
        return model_cls(**fields)
    except ValidationError as exc:
        raise ValidationFailed(format_validation_errors(exc.errors())) from exc


def as_datetime(value: Optional[Union[date, datetime]]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def normalize_due_date(value: Optional[Union[date, datetime]]) -> Optional[datetime]:
    """Pin a due date to noon so it stays on the same day across time zones."""
    value = as_datetime(value)
    if value is None:
        return None
    return value.replace(hour=NOON.hour, minute=NOON.minute, second=0, microsecond=0)


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    due_date: Optional[Union[date, datetime]] = None
    priority: Priority = Priority.MEDIUM
    category: str = ""
    tag_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_task(cls, task: Task) -> "TaskForm":
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            category=task.category or "",
            tag_ids=[tag.id for tag in task.tags],
        )

    def toggle_tag(self, tag_id: str) -> None:
        if tag_id in self.tag_ids:
            self.tag_ids.remove(tag_id)
        else:
            self.tag_ids.append(tag_id)

    def _optional_fields(self) -> dict:
        # Blank optional text is left out rather than sent empty
        fields = {}
        if self.description.strip():
            fields["description"] = self.description.strip()
        if self.category:
            fields["category"] = self.category
        return fields

    def to_create(self) -> TaskCreate:
        return build(
            TaskCreate,
            title=self.title,
            due_date=as_datetime(self.due_date),
            priority=self.priority,
            tag_ids=list(self.tag_ids),
            **self._optional_fields(),
        )

    def to_update(self) -> TaskUpdate:
        fields = self._optional_fields()
        if self.due_date is not None:
            fields["due_date"] = normalize_due_date(self.due_date)
        return build(
            TaskUpdate,
            title=self.title,
            priority=self.priority,
            tag_ids=list(self.tag_ids),
            **fields,
        )
