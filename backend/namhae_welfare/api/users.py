"""
Namhae Welfare — Users API Router
Resident registration and lookup by user key.
"""

from fastapi import APIRouter

from namhae_welfare.models.user import UserCreate
from namhae_welfare.services.user_registry import calculate_age, get_user_registry

router = APIRouter()


@router.post("")
async def register_user(form: UserCreate):
    """Register a resident aged 65+ and issue their lookup key."""
    registry = get_user_registry()
    user, _age = await registry.register(form)
    return {
        "success": True,
        "user_id": user.id,
        "user_key": user.user_key,
        "age_group": user.age_group.value,
        "message": "사용자 정보가 성공적으로 등록되었습니다.",
    }


@router.get("/{user_key}")
async def get_user(user_key: str):
    """Get a resident's profile by user key."""
    user = await get_user_registry().find_by_key(user_key)
    return {
        "success": True,
        "user": {
            "name": user.name,
            "birth_date": user.birth_date.isoformat(),
            "address": user.address,
            "district_code": user.district_code,
            "age_group": user.age_group.value,
            "age": calculate_age(user.birth_date),
        },
    }
