"""Async HTTP client for the task board procedures."""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import InternalError, ProcedureError
from ..models import TaskStatus
from ..schemas.tag import SuccessResponse, Tag, TagCreate, TagUpdate
from ..schemas.task import Task, TaskCreate, TaskReorder, TaskUpdate
from ..schemas.user import AuthResponse, User as UserSchema

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

BAD_RESPONSE = "Unexpected response from the server"


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _parse(model_cls: Type[ModelT], data: Any) -> ModelT:
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        logger.warning("Response did not match %s: %s", model_cls.__name__, exc)
        raise InternalError(BAD_RESPONSE) from exc


def _parse_list(model_cls: Type[ModelT], data: Any) -> List[ModelT]:
    if not isinstance(data, list):
        logger.warning("Expected a list of %s, got %s", model_cls.__name__, type(data).__name__)
        raise InternalError(BAD_RESPONSE)
    return [_parse(model_cls, item) for item in data]


class TaskBoardClient:
    """One coroutine per procedure.

    Failures are raised as the same ``ProcedureError`` subclasses the API
    uses. Network failures and malformed responses become ``InternalError``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "TaskBoardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise InternalError("Could not reach the server") from exc

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = ProcedureError.from_payload(payload, response.status_code)
            logger.debug("%s %s -> %d %s", method, path, response.status_code, error.code.value)
            raise error

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a body that is not JSON", method, path)
            raise InternalError(BAD_RESPONSE) from exc

    # auth

    async def _authenticate(self, path: str, email: str, password: str) -> UserSchema:
        data = await self._request("POST", path, json={"email": email, "password": password})
        auth = _parse(AuthResponse, data)
        self.token = auth.access_token
        return auth.user

    async def sign_up(self, email: str, password: str) -> UserSchema:
        return await self._authenticate("/api/auth/signup", email, password)

    async def sign_in(self, email: str, password: str) -> UserSchema:
        return await self._authenticate("/api/auth/signin", email, password)

    async def sign_out(self) -> None:
        await self._request("POST", "/api/auth/signout")
        self.token = None

    # tasks

    async def list_tasks(self) -> List[Task]:
        return _parse_list(Task, await self._request("GET", "/api/tasks"))

    async def create_task(self, task: TaskCreate) -> Task:
        return _parse(Task, await self._request("POST", "/api/tasks", json=_dump(task)))

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        return _parse(Task, await self._request("PUT", f"/api/tasks/{task_id}", json=_dump(changes)))

    async def delete_task(self, task_id: str) -> bool:
        return _parse(SuccessResponse, await self._request("DELETE", f"/api/tasks/{task_id}")).success

    async def reorder_task(self, task_id: str, status: TaskStatus, order: int) -> Task:
        body = _dump(TaskReorder(status=status, order=order))
        return _parse(Task, await self._request("POST", f"/api/tasks/{task_id}/reorder", json=body))

    # tags

    async def list_tags(self) -> List[Tag]:
        return _parse_list(Tag, await self._request("GET", "/api/tags"))

    async def create_tag(self, tag: TagCreate) -> Tag:
        return _parse(Tag, await self._request("POST", "/api/tags", json=_dump(tag)))

    async def update_tag(self, tag_id: str, tag: TagUpdate) -> Tag:
        return _parse(Tag, await self._request("PUT", f"/api/tags/{tag_id}", json=_dump(tag)))

    async def delete_tag(self, tag_id: str) -> bool:
        return _parse(SuccessResponse, await self._request("DELETE", f"/api/tags/{tag_id}")).success
