from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.schemas import UserUpsert
from storefront.repos.user_repo import UserRepo
from storefront.utils.errors import NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """Local profile rows; identity itself is verified upstream."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def ensure_user(self, user_id: str) -> UserModel:
        # carts need a profile row as FK anchor, created on first use
        existing = self.repo.get_user(user_id)
        if existing:
            return existing

        logger.info(f"Creating profile row for user {user_id}")
        return self.repo.add_user(UserModel(id=user_id))

    def upsert_user(self, payload: UserUpsert) -> UserModel:
        user = self.repo.get_user(payload.id)
        if user is None:
            user = self.repo.add_user(UserModel(id=payload.id))

        for field, value in payload.model_dump(exclude={"id"}, exclude_unset=True).items():
            setattr(user, field, value)

        self.repo.commit()
        self.repo.refresh(user)
        return user

    def get_user(self, user_id: str) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
