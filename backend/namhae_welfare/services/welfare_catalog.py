"""
Namhae Welfare — Welfare Service Catalog
Static national and county programs for residents 60+, seeded into storage on first use.
"""

from typing import Optional

from namhae_welfare.core.database import WelfareDatabase, get_database
from namhae_welfare.models.welfare import WelfareService
from namhae_welfare.utils.logger import logger


# ══════════════════════════════════════════
# SEED CATALOG
# ══════════════════════════════════════════

WELFARE_SERVICES = [
    {
        "name": "기초연금",
        "category": "경제지원",
        "description": "65세 이상 어르신의 안정적인 소득 보장",
        "benefits": "월 최대 342,510원 지급",
        "requirements": "65세 이상, 소득 하위 70%",
        "contact_info": "국민연금공단 1355",
        "is_national": True,
        "target_age_min": 65,
        "target_age_max": 150,
    },
    {
        "name": "노인맞춤돌봄서비스",
        "category": "돌봄지원",
        "description": "남해군 특화 맞춤형 돌봄 서비스",
        "benefits": "월 40시간 무료 돌봄 서비스",
        "requirements": "65세 이상 독거노인 또는 고위험군",
        "contact_info": "남해군청 055-860-3000",
        "is_national": False,
        "target_age_min": 65,
        "target_age_max": 150,
    },
    {
        "name": "노인일자리 사업",
        "category": "일자리",
        "description": "어르신 맞춤형 일자리 제공",
        "benefits": "월 최대 594,000원",
        "requirements": "65세 이상, 건강상태 양호",
        "contact_info": "남해군시니어클럽 055-863-8808",
        "is_national": True,
        "target_age_min": 65,
        "target_age_max": 150,
    },
    {
        "name": "의료비 지원",
        "category": "의료지원",
        "description": "노인성 질환 치료비 지원",
        "benefits": "연간 최대 120만원",
        "requirements": "65세 이상, 기초생활수급자",
        "contact_info": "남해군보건소 055-860-8000",
        "is_national": False,
        "target_age_min": 65,
        "target_age_max": 150,
    },
    {
        "name": "치매검진 서비스",
        "category": "의료지원",
        "description": "치매 조기 발견 및 관리",
        "benefits": "무료 치매검진, 예방교육",
        "requirements": "60세 이상",
        "contact_info": "남해군치매안심센터 055-860-8750",
        "is_national": True,
        "target_age_min": 60,
        "target_age_max": 150,
    },
]


class WelfareCatalog:
    """Read access to the welfare program catalog."""

    def __init__(self, db: Optional[WelfareDatabase] = None):
        self.db = db or get_database()
        inserted = self.db.seed_welfare_services(WELFARE_SERVICES)
        if inserted:
            logger.info(f"📚 Seeded {inserted} welfare services")

    def list_services(self) -> list[WelfareService]:
        return [WelfareService(**row) for row in self.db.list_welfare_services()]

    def services_for_age(self, age: int) -> list[WelfareService]:
        """Programs whose inclusive [target_age_min, target_age_max] range contains age."""
        return [s for s in self.list_services() if s.covers_age(age)]


# --- Singleton ---
_catalog: WelfareCatalog | None = None


def get_welfare_catalog() -> WelfareCatalog:
    """Returns a cached Welfare Catalog instance (seeding storage on first call)."""
    global _catalog
    if _catalog is None:
        _catalog = WelfareCatalog()
    return _catalog
