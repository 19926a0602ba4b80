from __future__ import annotations

from typing import List, Optional

from ..data.interface import BackendClient, BackendError, select_one
from ..data.models import CompanyAccess
from ..logging import get_logger

logger = get_logger(__name__)


def fetch_company_access(backend: BackendClient, email: str) -> Optional[List[CompanyAccess]]:
    """Businesses the staff member with this email may act for.

    Returns None when the staff lookup fails or no staff record exists, and an
    empty list for a staff member without any grants.
    """
    logger.debug(f"Fetching company access for email: {email}")
    try:
        staff = select_one(backend, "staff", columns="id", match={"staff_email": email})
    except BackendError as e:
        logger.error(f"Error fetching staff data: {e}")
        return None

    if staff is None:
        logger.info(f"No staff record found for email: {email}")
        return None

    try:
        rows = backend.select(
            "company_access",
            columns="id, business_name, owner_id, staff_id, created_at",
            match={"staff_id": staff["id"]},
        )
    except BackendError as e:
        logger.error(f"Error fetching company access: {e}")
        return None

    access = [
        CompanyAccess(
            id=str(row["id"]),
            business_name=row.get("business_name") or "Unknown Company",
            owner_id=str(row.get("owner_id") or ""),
            staff_id=str(row["staff_id"]),
            created_at=row.get("created_at"),
        )
        for row in rows
    ]
    if not access:
        logger.info("No company access found")
    return access
