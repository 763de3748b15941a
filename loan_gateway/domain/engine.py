"""Assessment engine - core eligibility and risk-scoring logic for loan decisions"""

from typing import Optional, Tuple
from loan_gateway.domain.amortization import amortized_payment
from loan_gateway.domain.exceptions import InvalidInputError
from loan_gateway.domain.models import Applicant, Assessment, Checkpoint, CheckpointStatus, Decision
from loan_gateway.domain.policy import CreditBand, DtiBand, PolicyDataset, Product

AGE_LABEL = "Age Verification"
AMOUNT_LABEL = "Amount Compliance"
TENURE_LABEL = "Tenure Compliance"
CREDIT_LABEL = "Credit Integrity"
DTI_LABEL = "Debt-to-Income"

# Status cut-offs shown to users; independent of the dataset's band thresholds
CREDIT_PASS_SCORE = 35
DTI_PASS_RATIO = 0.4
DTI_WARN_RATIO = 0.5


def check_age(applicant: Applicant, dataset: PolicyDataset) -> Tuple[bool, Checkpoint]:
    limits = dataset.age_limits
    valid = limits.min <= applicant.age <= limits.max
    return valid, Checkpoint(
        label=AGE_LABEL,
        status=CheckpointStatus.PASS if valid else CheckpointStatus.FAIL,
        detail=f"{applicant.age} yrs ({limits.min}-{limits.max} required)",
    )


def check_amount(applicant: Applicant, product: Product) -> Tuple[bool, Checkpoint]:
    valid = applicant.requested_principal <= product.max_principal
    return valid, Checkpoint(
        label=AMOUNT_LABEL,
        status=CheckpointStatus.PASS if valid else CheckpointStatus.FAIL,
        detail=(
            f"${_format_amount(applicant.requested_principal)} requested "
            f"(Max: ${_format_amount(product.max_principal)})"
        ),
    )


def check_tenure(applicant: Applicant, product: Product) -> Tuple[bool, Checkpoint]:
    tenure = applicant.requested_tenure_months
    valid = product.min_tenure_months <= tenure <= product.max_tenure_months
    return valid, Checkpoint(
        label=TENURE_LABEL,
        status=CheckpointStatus.PASS if valid else CheckpointStatus.FAIL,
        detail=f"{tenure} months requested ({product.min_tenure_months}-{product.max_tenure_months} allowed)",
    )


def classify_credit_status(band_score: int) -> CheckpointStatus:
    if band_score >= CREDIT_PASS_SCORE:
        return CheckpointStatus.PASS
    elif band_score > 0:
        return CheckpointStatus.WARN
    else:
        return CheckpointStatus.FAIL


def check_credit(applicant: Applicant, dataset: PolicyDataset) -> Tuple[CreditBand, Checkpoint]:
    band = dataset.band_for_credit_score(applicant.credit_score)
    return band, Checkpoint(
        label=CREDIT_LABEL,
        status=classify_credit_status(band.score),
        detail=f"Score {applicant.credit_score} ({band.name.upper()} band). Weight: +{band.score}",
    )


def classify_dti_status(ratio: float) -> CheckpointStatus:
    """Upper edges are inclusive: 0.4 passes, 0.5 warns"""
    if ratio <= DTI_PASS_RATIO:
        return CheckpointStatus.PASS
    elif ratio <= DTI_WARN_RATIO:
        return CheckpointStatus.WARN
    else:
        return CheckpointStatus.FAIL


def calculate_dti(applicant: Applicant, dataset: PolicyDataset) -> Tuple[float, float, float]:
    """
    Compute affordability figures for the requested loan.

    Returns: (new_emi, combined_monthly_obligation, dti_ratio)

    Raises:
        InvalidInputError: If income or tenure is not positive
    """
    if applicant.monthly_income <= 0:
        raise InvalidInputError(f"Monthly income must be positive, got {applicant.monthly_income}")

    new_emi = amortized_payment(
        applicant.requested_principal,
        applicant.requested_tenure_months,
        dataset.annual_interest_rate,
    )
    total_obligation = applicant.existing_monthly_emi + new_emi
    return new_emi, total_obligation, total_obligation / applicant.monthly_income


def check_dti(ratio: float, dataset: PolicyDataset) -> Tuple[DtiBand, Checkpoint]:
    band = dataset.band_for_dti_ratio(ratio)
    threshold_percent = DTI_PASS_RATIO * 100
    return band, Checkpoint(
        label=DTI_LABEL,
        status=classify_dti_status(ratio),
        detail=f"Ratio: {ratio * 100:.1f}% (Threshold: {threshold_percent:.0f}%). Weight: +{band.score}",
    )


def determine_decision(gates_passed: bool, composite_score: int, dataset: PolicyDataset) -> Decision:
    """
    Map gate results and composite score to a decision.

    Gate failures override the score. The reject boundary is strict: a score
    equal to reject_below is not rejected by score alone.
    """
    thresholds = dataset.decision_thresholds
    if not gates_passed or composite_score < thresholds.reject_below:
        return Decision.REJECTED
    elif composite_score >= thresholds.approve_at:
        return Decision.APPROVED
    else:
        return Decision.REVIEW


def assess(
    applicant: Applicant,
    dataset: PolicyDataset,
    correlation_id: Optional[str] = None,
) -> Assessment:
    """
    Main entry point: evaluate an applicant against the policy dataset.

    Checkpoints are always produced in the order
    Age -> Amount -> Tenure -> Credit -> DTI, and every rule is evaluated even
    when an earlier gate fails. Pure: no I/O, logging, clock or randomness.

    Raises:
        UnknownProductError: If applicant.product_type is not in the dataset
        InvalidInputError: If income or tenure is not positive
    """
    age_valid, age_checkpoint = check_age(applicant, dataset)

    product = dataset.product_for(applicant.product_type)
    amount_valid, amount_checkpoint = check_amount(applicant, product)
    tenure_valid, tenure_checkpoint = check_tenure(applicant, product)

    credit_band, credit_checkpoint = check_credit(applicant, dataset)

    new_emi, total_obligation, dti_ratio = calculate_dti(applicant, dataset)
    dti_band, dti_checkpoint = check_dti(dti_ratio, dataset)

    composite_score = credit_band.score + dti_band.score
    decision = determine_decision(age_valid and amount_valid and tenure_valid, composite_score, dataset)

    return Assessment(
        decision=decision,
        composite_score=composite_score,
        dti_ratio_percent=dti_ratio * 100,
        estimated_new_emi=new_emi,
        combined_monthly_obligation=total_obligation,
        credit_band=credit_band.name,
        dti_category=dti_band.category,
        checkpoints=(
            age_checkpoint,
            amount_checkpoint,
            tenure_checkpoint,
            credit_checkpoint,
            dti_checkpoint,
        ),
        policy_version=dataset.version,
        correlation_id=correlation_id,
    )


def _format_amount(value: float) -> str:
    """Thousands-separated amount; cents only when present"""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"
