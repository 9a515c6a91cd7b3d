"""
Namhae Welfare — User Registry
Registers residents aged 65+ and resolves them by their opaque user key.
"""

import uuid
from datetime import date
from typing import Optional

from namhae_welfare.config import get_settings
from namhae_welfare.core.database import WelfareDatabase, get_database, utc_now
from namhae_welfare.core.errors import NotFoundError, ValidationError
from namhae_welfare.models.user import AgeGroup, User, UserCreate
from namhae_welfare.utils.logger import logger
from namhae_welfare.utils.security import (
    decrypt_pii,
    encrypt_pii,
    generate_user_key,
    sanitize_input,
)


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Full years since birth_date, counting a birthday only once it has been reached."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def get_age_group(age: int) -> AgeGroup:
    if age >= 85:
        return AgeGroup.SUPER_ELDERLY
    if age >= 75:
        return AgeGroup.ELDERLY
    if age >= 65:
        return AgeGroup.PRE_ELDERLY
    return AgeGroup.GENERAL


def parse_birth_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError("생년월일 형식이 올바르지 않습니다. (YYYY-MM-DD)")


class UserRegistry:
    """Creates and looks up residents. The user key is their only credential."""

    def __init__(self, db: Optional[WelfareDatabase] = None):
        self.db = db or get_database()

    async def register(self, form: UserCreate) -> tuple[User, int]:
        """
        Validate the form, enforce the minimum age and store the resident.
        Returns the new user and their current age.
        """
        name = sanitize_input(form.name)
        address = sanitize_input(form.address)
        district_code = sanitize_input(form.district_code)
        raw_birth_date = sanitize_input(form.birth_date)

        if not (name and raw_birth_date and address and district_code):
            raise ValidationError("모든 필드가 필요합니다.")

        birth_date = parse_birth_date(raw_birth_date)
        if birth_date > date.today():
            raise ValidationError("생년월일이 미래일 수 없습니다.")

        age = calculate_age(birth_date)
        min_age = get_settings().min_eligible_age
        if age < min_age:
            raise ValidationError(f"이 서비스는 {min_age}세 이상 어르신을 대상으로 합니다.")

        user = User(
            id=str(uuid.uuid4()),
            user_key=generate_user_key(),
            name=name,
            birth_date=birth_date,
            address=address,
            district_code=district_code,
            age_group=get_age_group(age),
            created_at=utc_now(),
        )

        self.db.insert_user({
            "id": user.id,
            "user_key": user.user_key,
            "name": encrypt_pii(user.name),
            "birth_date": user.birth_date.isoformat(),
            "address": encrypt_pii(user.address),
            "district_code": user.district_code,
            "age_group": user.age_group.value,
            "created_at": user.created_at.isoformat(),
        })

        logger.info(f"👤 User registered: {user.id} (age {age}, {user.age_group.value}, district {district_code})")
        return user, age

    async def find_by_key(self, user_key: Optional[str]) -> User:
        row = self.db.get_user_by_key(user_key) if user_key else None
        if not row:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        return self._to_user(row)

    async def find_by_id(self, user_id: str) -> User:
        row = self.db.get_user_by_id(user_id)
        if not row:
            raise NotFoundError("사용자 정보를 찾을 수 없습니다.")
        return self._to_user(row)

    @staticmethod
    def _to_user(row: dict) -> User:
        return User(
            **{
                **row,
                "name": decrypt_pii(row["name"]),
                "address": decrypt_pii(row["address"]),
            }
        )


# --- Singleton ---
_registry: UserRegistry | None = None


def get_user_registry() -> UserRegistry:
    """Returns a cached User Registry instance."""
    global _registry
    if _registry is None:
        _registry = UserRegistry()
    return _registry
