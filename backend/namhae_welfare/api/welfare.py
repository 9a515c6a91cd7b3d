"""
Namhae Welfare — Welfare Services API Router
Read-only view of the program catalog.
"""

from typing import Optional

from fastapi import APIRouter, Query

from namhae_welfare.services.welfare_catalog import get_welfare_catalog

router = APIRouter()


@router.get("")
async def list_welfare_services(
    age: Optional[int] = Query(None, ge=0, le=150, description="Only programs covering this age"),
):
    """List catalog entries, optionally filtered by inclusive age range."""
    catalog = get_welfare_catalog()
    services = catalog.services_for_age(age) if age is not None else catalog.list_services()
    return {
        "success": True,
        "total": len(services),
        "services": [s.model_dump() for s in services],
    }
