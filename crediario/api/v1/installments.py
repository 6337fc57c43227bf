"""POST /v1/installments/preview - Installment schedule preview"""

import logging

from fastapi import APIRouter, HTTPException

from crediario.api.v1.schemas import InstallmentPreviewRequest, InstallmentPreviewResponse, InstallmentSchema
from crediario.config import settings
from crediario.domain.exceptions import ValidationError
from crediario.domain.installments import build_installments, count_paid, resize_due_dates
from crediario.infrastructure.observability.metrics import validation_failure_counter
from crediario.utils.date_utils import calendar_today

router = APIRouter()


@router.post("/installments/preview", response_model=InstallmentPreviewResponse)
def preview_installments(request_body: InstallmentPreviewRequest):
    """
    Split an order total into installments without touching the store.

    Blank or invalid due dates fall back to one month apart starting today,
    which is what the order form shows before the user fills every date in.
    """
    try:
        due_dates = request_body.due_dates
        if due_dates is not None and request_body.count >= 1:
            # form keeps typed dates when the count changes, new slots get defaults
            today = calendar_today(tz_name=settings.business_timezone)
            due_dates = resize_due_dates(due_dates, request_body.count, today)
        installments = build_installments(
            request_body.total_cents,
            request_body.count,
            due_dates,
            request_body.already_paid_cents,
        )
    except ValidationError as e:
        validation_failure_counter.labels(kind=type(e).__name__).inc()
        logging.warning(f"Invalid preview request: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return InstallmentPreviewResponse(
        total_cents=request_body.total_cents,
        installments=[InstallmentSchema.from_domain(i) for i in installments],
        paid_installments=count_paid(installments),
    )
