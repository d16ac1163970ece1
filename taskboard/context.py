from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .routers.auth import get_current_user


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller and the session a procedure runs in.

    Every task and tag service function receives one of these instead of
    looking the caller up on its own.
    """
    user: User
    db: Session

    @property
    def user_id(self) -> str:
        return str(self.user.id)


def get_context(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequestContext:
    return RequestContext(user=current_user, db=db)
