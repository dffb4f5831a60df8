"""Enrollment API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.modules.enrollment.schemas import (
    EnrollmentRead,
    EnrollmentRequest,
    EnrollmentResult,
    PaymentsOverviewRead,
)
from app.modules.enrollment.service import EnrollmentService, get_enrollment_service
from app.modules.identity.service import get_current_student

router = APIRouter(tags=["enrollment"])


@router.post("/enroll", response_model=EnrollmentResult, status_code=status.HTTP_201_CREATED)
async def enroll(
    payload: EnrollmentRequest,
    current_student=Depends(get_current_student),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResult:
    """Submit a group or individual tutoring application."""
    return await service.enroll(payload, current_student)


@router.get("/student/enrollments", response_model=list[EnrollmentRead])
async def list_my_enrollments(
    current_student=Depends(get_current_student),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrollmentRead]:
    return await service.list_enrollments(current_student)


@router.get("/student/payments", response_model=PaymentsOverviewRead)
async def get_my_payments(
    current_student=Depends(get_current_student),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> PaymentsOverviewRead:
    """Active term enrollments with payment totals."""
    return await service.get_payments_overview(current_student)
