"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class EmploymentType(str, Enum):
    """How the applicant earns their income"""

    SALARIED = "Salaried"
    SELF_EMPLOYED = "SelfEmployed"


class CheckpointStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class Decision(str, Enum):
    """Final policy outcome of an assessment"""

    APPROVED = "APPROVED"
    REVIEW = "REVIEW"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Applicant:
    """Snapshot of applicant data collected upstream"""

    age: int
    employment_type: EmploymentType
    employment_years: float
    monthly_income: float
    credit_score: int
    existing_monthly_emi: float
    existing_loan_count: int
    requested_principal: float
    product_type: str
    requested_tenure_months: int


@dataclass(frozen=True)
class Checkpoint:
    """One audited rule evaluation"""

    label: str
    status: CheckpointStatus
    detail: str


@dataclass(frozen=True)
class Assessment:
    """Output of the assessment engine"""

    decision: Decision
    composite_score: int
    dti_ratio_percent: float
    estimated_new_emi: float
    combined_monthly_obligation: float
    credit_band: str
    dti_category: str
    checkpoints: Tuple[Checkpoint, ...]
    policy_version: str
    correlation_id: Optional[str] = None

    @property
    def failed_checkpoints(self) -> Tuple[Checkpoint, ...]:
        return tuple(c for c in self.checkpoints if c.status is CheckpointStatus.FAIL)


@dataclass(frozen=True)
class Installment:
    """Single monthly payment in an amortization schedule"""

    number: int
    payment: float
    interest: float
    principal: float
    balance: float
