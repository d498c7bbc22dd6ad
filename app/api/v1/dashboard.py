"""
Dashboard endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.attendance import AttendanceOut
from app.schemas.dashboard import EmployeeDashboardOut, ManagerDashboardOut
from app.services import dashboard_service

router = APIRouter()


@router.get("/employee", response_model=EmployeeDashboardOut)
async def employee_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Today's status and month-to-date statistics for the caller"""
    stats = dashboard_service.employee_dashboard(db, current_user.id)
    today = stats.pop("today")
    return EmployeeDashboardOut(
        **stats,
        today=AttendanceOut.model_validate(today) if today else None,
    )


@router.get("/manager", response_model=ManagerDashboardOut)
async def manager_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Team statistics (manager/admin only)"""
    return dashboard_service.manager_dashboard(db, current_user.id)
