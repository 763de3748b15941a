"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import List, Optional

from loan_gateway.domain.models import Applicant, CheckpointStatus, Decision, EmploymentType


class AssessmentRequest(BaseModel):
    """Request body for POST /v1/assessment"""

    age: int = Field(..., ge=0, description="Applicant age in years")
    employment_type: EmploymentType
    employment_years: float = Field(..., ge=0, description="Years in current occupation")
    monthly_income: float = Field(..., gt=0, description="Gross monthly income")
    credit_score: int = Field(..., ge=300, le=850, description="Bureau credit score")
    existing_monthly_emi: float = Field(0, ge=0, description="Current monthly EMI outflow")
    existing_loan_count: int = Field(0, ge=0, description="Number of active loans")
    requested_principal: float = Field(..., gt=0, description="Requested loan amount")
    product_type: str = Field(..., min_length=1, description="Product category, e.g. Personal")
    requested_tenure_months: int = Field(..., gt=0, description="Repayment tenure in months")

    def to_applicant(self) -> Applicant:
        return Applicant(
            age=self.age,
            employment_type=self.employment_type,
            employment_years=self.employment_years,
            monthly_income=self.monthly_income,
            credit_score=self.credit_score,
            existing_monthly_emi=self.existing_monthly_emi,
            existing_loan_count=self.existing_loan_count,
            requested_principal=self.requested_principal,
            product_type=self.product_type,
            requested_tenure_months=self.requested_tenure_months,
        )


class CheckpointSchema(BaseModel):
    """Single rule evaluation in the audit trail"""

    label: str
    status: CheckpointStatus
    detail: str


class AssessmentResponse(BaseModel):
    """Response for POST /v1/assessment"""

    correlation_id: Optional[str] = None
    decision: Decision
    composite_score: int
    dti_ratio_percent: float
    estimated_new_emi: float
    combined_monthly_obligation: float
    credit_band: str
    dti_category: str
    policy_version: str
    checkpoints: List[CheckpointSchema]


class AgeLimitsSchema(BaseModel):
    min: int
    max: int


class CreditBandSchema(BaseModel):
    band: str
    min_score: int
    score: int


class DtiBandSchema(BaseModel):
    category: str
    threshold: float
    score: int


class ProductSchema(BaseModel):
    type: str
    max_principal: float
    min_tenure_months: int
    max_tenure_months: int


class DecisionThresholdsSchema(BaseModel):
    approve_at: int
    reject_below: int


class PolicyResponse(BaseModel):
    """Response for GET /v1/policy"""

    version: str
    annual_interest_rate: float
    age_limits: AgeLimitsSchema
    credit_bands: List[CreditBandSchema]
    dti_bands: List[DtiBandSchema]
    products: List[ProductSchema]
    decision_thresholds: DecisionThresholdsSchema


class EmiQuoteRequest(BaseModel):
    """Request body for POST /v1/emi/quote"""

    product_type: str = Field(..., min_length=1)
    principal: float = Field(..., gt=0)
    tenure_months: int = Field(..., gt=0, le=600)


class InstallmentSchema(BaseModel):
    """Single month in a repayment schedule"""

    number: int
    payment: float
    interest: float
    principal: float
    balance: float


class EmiQuoteResponse(BaseModel):
    """Response for POST /v1/emi/quote"""

    product_type: str
    annual_interest_rate: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    installments: List[InstallmentSchema]
