"""Unit tests for the assessment engine"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from loan_gateway.domain.engine import (
    assess,
    classify_credit_status,
    classify_dti_status,
    determine_decision,
)
from loan_gateway.domain.exceptions import InvalidInputError, UnknownProductError
from loan_gateway.domain.models import CheckpointStatus, Decision
from loan_gateway.domain.policy import parse_policy_dataset, policy_to_dict

CHECKPOINT_ORDER = [
    "Age Verification",
    "Amount Compliance",
    "Tenure Compliance",
    "Credit Integrity",
    "Debt-to-Income",
]

DECISION_RANK = {Decision.REJECTED: 0, Decision.REVIEW: 1, Decision.APPROVED: 2}


def test_assess_strong_personal_loan_approved(policy, make_applicant):
    """Age 30, Personal 500k / 36m, score 760, income 50k -> APPROVED"""
    assessment = assess(make_applicant(), policy)

    assert assessment.decision is Decision.APPROVED
    assert assessment.composite_score == 100
    assert assessment.credit_band == "excellent"
    assert assessment.dti_category == "safe"
    assert round(assessment.estimated_new_emi) == 16_134
    assert assessment.combined_monthly_obligation == assessment.estimated_new_emi
    assert assessment.dti_ratio_percent == pytest.approx(32.27, abs=0.01)
    assert assessment.policy_version == "2024.1"
    assert [c.label for c in assessment.checkpoints] == CHECKPOINT_ORDER
    assert all(c.status is CheckpointStatus.PASS for c in assessment.checkpoints)


def test_assess_checkpoint_details(policy, make_applicant):
    """Details carry the literal numbers the presentation layer displays"""
    details = [c.detail for c in assess(make_applicant(), policy).checkpoints]

    assert details == [
        "30 yrs (21-60 required)",
        "$500,000 requested (Max: $1,500,000)",
        "36 months requested (12-60 allowed)",
        "Score 760 (EXCELLENT band). Weight: +50",
        "Ratio: 32.3% (Threshold: 40%). Weight: +50",
    ]


def test_assess_amount_detail_keeps_cents(policy, make_applicant):
    assessment = assess(make_applicant(requested_principal=12_345.5), policy)
    assert assessment.checkpoints[1].detail == "$12,345.50 requested (Max: $1,500,000)"


def test_assess_underage_rejected_with_full_trail(policy, make_applicant):
    """Age 19 with otherwise perfect profile -> REJECTED, all checkpoints reported"""
    assessment = assess(make_applicant(age=19), policy)

    assert assessment.decision is Decision.REJECTED
    assert [c.label for c in assessment.checkpoints] == CHECKPOINT_ORDER
    assert assessment.checkpoints[0].status is CheckpointStatus.FAIL
    assert assessment.checkpoints[0].detail == "19 yrs (21-60 required)"
    assert all(c.status is CheckpointStatus.PASS for c in assessment.checkpoints[1:])
    assert assessment.composite_score == 100


def test_age_gate_overrides_perfect_score(policy, make_applicant):
    """Age 18, credit 820, income far above obligations -> still REJECTED"""
    assessment = assess(make_applicant(age=18, credit_score=820, monthly_income=1_000_000), policy)

    assert assessment.composite_score == 100
    assert assessment.decision is Decision.REJECTED


@pytest.mark.parametrize("age, valid", [(20, False), (21, True), (60, True), (61, False)])
def test_age_limits_inclusive(policy, make_applicant, age, valid):
    assessment = assess(make_applicant(age=age), policy)

    expected = CheckpointStatus.PASS if valid else CheckpointStatus.FAIL
    assert assessment.checkpoints[0].status is expected
    assert (assessment.decision is Decision.APPROVED) == valid


def test_amount_above_product_max_rejected(policy, make_applicant):
    assessment = assess(
        make_applicant(requested_principal=1_500_001, monthly_income=1_000_000),
        policy,
    )

    assert assessment.checkpoints[1].status is CheckpointStatus.FAIL
    assert assessment.decision is Decision.REJECTED


def test_amount_at_product_max_passes(policy, make_applicant):
    assessment = assess(
        make_applicant(requested_principal=1_500_000, monthly_income=1_000_000),
        policy,
    )

    assert assessment.checkpoints[1].status is CheckpointStatus.PASS
    assert assessment.decision is Decision.APPROVED


@pytest.mark.parametrize("tenure, valid", [(11, False), (12, True), (60, True), (61, False)])
def test_tenure_range_inclusive(policy, make_applicant, tenure, valid):
    assessment = assess(make_applicant(requested_tenure_months=tenure, monthly_income=1_000_000), policy)

    expected = CheckpointStatus.PASS if valid else CheckpointStatus.FAIL
    assert assessment.checkpoints[2].status is expected
    assert assessment.checkpoints[2].detail == f"{tenure} months requested (12-60 allowed)"


@pytest.mark.parametrize(
    "band_score, expected",
    [
        (50, CheckpointStatus.PASS),
        (35, CheckpointStatus.PASS),
        (34, CheckpointStatus.WARN),
        (1, CheckpointStatus.WARN),
        (0, CheckpointStatus.FAIL),
    ],
)
def test_classify_credit_status(band_score, expected):
    assert classify_credit_status(band_score) is expected


@pytest.mark.parametrize(
    "ratio, expected",
    [
        (0.0, CheckpointStatus.PASS),
        (0.4, CheckpointStatus.PASS),
        (0.4000001, CheckpointStatus.WARN),
        (0.5, CheckpointStatus.WARN),
        (0.5000001, CheckpointStatus.FAIL),
        (3.0, CheckpointStatus.FAIL),
    ],
)
def test_classify_dti_status(ratio, expected):
    assert classify_dti_status(ratio) is expected


@pytest.mark.parametrize(
    "income, status, category",
    [
        (2_500, CheckpointStatus.PASS, "safe"),  # 1000 / 2500 == 0.4
        (2_000, CheckpointStatus.WARN, "review"),  # 1000 / 2000 == 0.5
        (1_999.99, CheckpointStatus.FAIL, "reject"),
    ],
)
def test_dti_boundaries_end_to_end(zero_rate_policy, make_applicant, income, status, category):
    """At 0% interest, 12,000 over 12 months is exactly 1,000 a month"""
    assessment = assess(
        make_applicant(requested_principal=12_000, requested_tenure_months=12, monthly_income=income),
        zero_rate_policy,
    )

    assert assessment.estimated_new_emi == 1000.0
    assert assessment.checkpoints[4].status is status
    assert assessment.dti_category == category


def test_existing_emi_counts_toward_dti(zero_rate_policy, make_applicant):
    assessment = assess(
        make_applicant(
            requested_principal=12_000,
            requested_tenure_months=12,
            existing_monthly_emi=500,
            monthly_income=5_000,
        ),
        zero_rate_policy,
    )

    assert assessment.combined_monthly_obligation == 1500.0
    assert assessment.dti_ratio_percent == pytest.approx(30.0)


@pytest.mark.parametrize(
    "credit_score, expected",
    [
        (760, Decision.APPROVED),  # 50 + 50
        (720, Decision.APPROVED),  # 35 + 50
        (660, Decision.APPROVED),  # 20 + 50, exactly approve_at
        (600, Decision.REVIEW),  # 0 + 50
    ],
)
def test_decision_by_credit_band(policy, make_applicant, credit_score, expected):
    assert assess(make_applicant(credit_score=credit_score), policy).decision is expected


def test_low_score_rejected_without_gate_failure(policy, make_applicant):
    """reject band (0) + review band (25) = 25 < 40 -> REJECTED"""
    assessment = assess(make_applicant(credit_score=600, monthly_income=35_000), policy)

    assert assessment.dti_category == "review"
    assert assessment.composite_score == 25
    assert [c.label for c in assessment.failed_checkpoints] == ["Credit Integrity"]
    assert assessment.decision is Decision.REJECTED


def test_decision_monotonic_in_credit_band(policy, make_applicant):
    """Dropping a credit band never improves the decision"""
    ranks = [
        DECISION_RANK[assess(make_applicant(credit_score=score, monthly_income=35_000), policy).decision]
        for score in (800, 720, 660, 500)
    ]

    assert ranks == sorted(ranks, reverse=True)


def test_score_at_reject_threshold_is_not_rejected(policy_data, make_applicant):
    """Strict '<': composite == reject_below falls through to REVIEW"""
    policy_data["dti_bands"][0]["score"] = 20
    dataset = parse_policy_dataset(policy_data)

    assessment = assess(make_applicant(credit_score=660), dataset)  # 20 + 20

    assert assessment.composite_score == 40
    assert dataset.decision_thresholds.reject_below == 40
    assert assessment.decision is Decision.REVIEW


@pytest.mark.parametrize(
    "gates_passed, score, expected",
    [
        (True, 39, Decision.REJECTED),
        (True, 40, Decision.REVIEW),
        (True, 69, Decision.REVIEW),
        (True, 70, Decision.APPROVED),
        (False, 100, Decision.REJECTED),
    ],
)
def test_determine_decision(policy, gates_passed, score, expected):
    assert determine_decision(gates_passed, score, policy) is expected


def test_unknown_product_raises(policy, make_applicant):
    with pytest.raises(UnknownProductError):
        assess(make_applicant(product_type="Yacht"), policy)


def test_non_positive_income_raises(policy, make_applicant):
    with pytest.raises(InvalidInputError):
        assess(make_applicant(monthly_income=0), policy)


def test_non_positive_tenure_raises(policy, make_applicant):
    with pytest.raises(InvalidInputError):
        assess(make_applicant(requested_tenure_months=0), policy)


def test_correlation_id_is_carried_through(policy, make_applicant):
    assessment = assess(make_applicant(), policy, correlation_id="trace-123")
    assert assessment.correlation_id == "trace-123"


def test_assess_is_deterministic(policy, make_applicant):
    applicant = make_applicant(credit_score=705, existing_monthly_emi=4_321.5)

    assert assess(applicant, policy) == assess(applicant, policy)


def test_assess_concurrent_calls_share_dataset(policy, make_applicant):
    applicants = [make_applicant(credit_score=score) for score in range(600, 800, 10)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        concurrent = list(pool.map(lambda a: assess(a, policy), applicants))

    assert concurrent == [assess(a, policy) for a in applicants]


def test_assess_does_not_mutate_inputs(policy, make_applicant):
    applicant = make_applicant()
    applicant_before = asdict(applicant)
    policy_before = policy_to_dict(policy)

    assess(applicant, policy)

    assert asdict(applicant) == applicant_before
    assert policy_to_dict(policy) == policy_before


def test_very_long_tenure_fails_tenure_gate(policy, make_applicant):
    """An absurd tenure is a business rejection, not a numeric error"""
    assessment = assess(make_applicant(requested_tenure_months=200_000), policy)

    assert assessment.decision is Decision.REJECTED
    assert assessment.checkpoints[2].status is CheckpointStatus.FAIL
    assert assessment.checkpoints[2].detail == "200000 months requested (12-60 allowed)"
    assert assessment.estimated_new_emi == pytest.approx(500_000 * 0.10 / 12)
