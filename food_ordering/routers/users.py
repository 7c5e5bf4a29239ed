from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.deps import get_current_user
from food_ordering.models.user import User
from food_ordering.schemas.users import DiscountInfoOut, ProfileUpdate, UserOut

router = APIRouter(prefix="/api/users", tags=["users"])


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "phone": user.phone,
        "user_type": user.user_type,
        "discount_type": user.discount_type,
    }


@router.get("/me", response_model=UserOut)
def read_me(user: User = Depends(get_current_user)):
    return _user_to_dict(user)


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("full_name") is not None:
        full_name = changes["full_name"].strip()
        if not full_name:
            raise HTTPException(status_code=400, detail="Full name must not be blank")
        user.full_name = full_name
    if "phone" in changes:
        user.phone = changes["phone"] or None
    if "discount_type" in changes:
        user.discount_type = changes["discount_type"] or None
    db.commit()
    return {"success": True, "message": "Profile updated successfully"}


@router.get("/discount-info", response_model=DiscountInfoOut)
def read_discount_info(user: User = Depends(get_current_user)):
    return {"discount_type": user.discount_type, "discount_photo": user.discount_photo}
