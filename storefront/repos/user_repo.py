from typing import Optional

from sqlalchemy.orm import Session

from storefront.models.user import User
from storefront.repos.base import Repository


class UserRepo(Repository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_name(self, name: str) -> Optional[User]:
        return self.find_by(name=name)
