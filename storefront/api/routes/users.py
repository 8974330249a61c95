import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.exceptions import APIError, UserNameTaken
from storefront.core.security import hash_password
from storefront.db.session import get_db
from storefront.models.user import User
from storefront.repos.user_repo import UserRepo
from storefront.schemas.user import UserCreate, UserResponse, UserUpdate
from storefront.utils.response import success

router = APIRouter()
logger = structlog.get_logger()


@router.get("")
def list_users(db: Session = Depends(get_db)):
    users = UserRepo(db).list(User.name)
    return success(data=[UserResponse.model_validate(user) for user in users])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, db: Session = Depends(get_db)):
    repo = UserRepo(db)
    if repo.get_by_name(user_in.name):
        raise UserNameTaken()

    user = repo.save(
        User(
            name=user_in.name,
            password_hash=hash_password(user_in.password),
        )
    )
    db.commit()
    db.refresh(user)

    return success(
        data=UserResponse.model_validate(user),
        message=f"User {user.name} was successfully created",
    )


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return success(data=UserResponse.model_validate(UserRepo(db).get_or_raise(user_id)))


@router.put("/{user_id}")
@router.patch("/{user_id}")
def update_user(user_id: int, user_in: UserUpdate, db: Session = Depends(get_db)):
    repo = UserRepo(db)
    user = repo.get_or_raise(user_id)

    if user_in.name and user_in.name != user.name:
        if repo.get_by_name(user_in.name):
            raise UserNameTaken()
        user.name = user_in.name
    if user_in.password:
        user.password_hash = hash_password(user_in.password)

    db.commit()
    db.refresh(user)
    return success(
        data=UserResponse.model_validate(user),
        message=f"User {user.name} was successfully updated",
    )


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    repo = UserRepo(db)
    user = repo.get_or_raise(user_id)

    if repo.count() <= 1:
        raise APIError(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="Can't delete last user",
        )

    repo.delete(user)
    db.commit()
    logger.info("user_deleted", user_id=user_id)
    return success(message="User was successfully destroyed")
