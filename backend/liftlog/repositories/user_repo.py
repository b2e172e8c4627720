# liftlog/repositories/user_repo.py
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from liftlog.models import User
from liftlog.repositories.base import BaseRepository

log = logging.getLogger(__name__)

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def create(self, *, email: str, name: str, password_hash: str) -> User:
        user = User(email=email, name=name, password_hash=password_hash)
        try:
            return self.save(user)
        except IntegrityError:
            self.db.rollback()
            log.info("duplicate registration for %s", email)
            # Re-raise a clean marker the router can map to 400
            raise ValueError("email_already_exists")
