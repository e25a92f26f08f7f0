from typing import Optional

from sqlalchemy.orm import Session

from storefront.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_clerk_id(self, clerk_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.clerk_id == clerk_id).first()

    def upsert(self, clerk_id: str, email: Optional[str], name: Optional[str]) -> User:
        u = self.get_by_clerk_id(clerk_id)
        if u:
            u.email = email
            u.name = name
        else:
            u = User(clerk_id=clerk_id, email=email, name=name)
            self.db.add(u)
        self.db.flush()
        return u

    def delete_by_clerk_id(self, clerk_id: str) -> bool:
        u = self.get_by_clerk_id(clerk_id)
        if not u:
            return False
        self.db.delete(u)
        self.db.flush()
        return True
