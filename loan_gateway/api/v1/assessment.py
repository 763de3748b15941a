"""POST /v1/assessment - loan eligibility and risk assessment endpoint"""

import asyncio
import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from loan_gateway.api.v1.schemas import AssessmentRequest, AssessmentResponse, CheckpointSchema
from loan_gateway.api.dependencies import get_correlation_id, get_policy_dataset
from loan_gateway.config import settings
from loan_gateway.domain.engine import assess
from loan_gateway.domain.exceptions import InvalidInputError, UnknownProductError
from loan_gateway.domain.policy import PolicyDataset
from loan_gateway.infrastructure.observability.metrics import record_assessment
from loan_gateway.infrastructure.observability.logging import log_assessment

router = APIRouter()


@router.post("/assessment", response_model=AssessmentResponse)
async def create_assessment(
    request_body: AssessmentRequest,
    request: Request,
    dataset: PolicyDataset = Depends(get_policy_dataset),
):
    """
    Assess a loan application against the active policy dataset.

    Flow:
    1. Validate applicant fields (pydantic, at the boundary)
    2. Optionally wait out the configured processing delay
    3. Run the pure assessment engine
    4. Record metrics and audit log
    5. Return decision, score, and checkpoint trail
    """
    start_time = time.time()
    correlation_id = get_correlation_id(request)

    try:
        if settings.assessment_delay_seconds > 0:
            await asyncio.sleep(settings.assessment_delay_seconds)

        assessment = assess(request_body.to_applicant(), dataset, correlation_id=correlation_id)

    except UnknownProductError as e:
        logging.warning(f"Unknown product: {e}", extra={"correlation_id": correlation_id})
        raise HTTPException(status_code=422, detail=str(e))

    except InvalidInputError as e:
        logging.warning(f"Invalid input: {e}", extra={"correlation_id": correlation_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"correlation_id": correlation_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(assessment)
    log_assessment(correlation_id, assessment, duration_ms)

    return AssessmentResponse(
        correlation_id=assessment.correlation_id,
        decision=assessment.decision,
        composite_score=assessment.composite_score,
        dti_ratio_percent=assessment.dti_ratio_percent,
        estimated_new_emi=assessment.estimated_new_emi,
        combined_monthly_obligation=assessment.combined_monthly_obligation,
        credit_band=assessment.credit_band,
        dti_category=assessment.dti_category,
        policy_version=assessment.policy_version,
        checkpoints=[
            CheckpointSchema(label=c.label, status=c.status, detail=c.detail)
            for c in assessment.checkpoints
        ],
    )
