"""Fixed-rate amortization math for monthly installment (EMI) loans"""

from typing import List
from loan_gateway.domain.exceptions import InvalidInputError
from loan_gateway.domain.models import Installment
from loan_gateway.domain.policy import DEFAULT_ANNUAL_INTEREST_RATE


def monthly_rate(annual_rate: float) -> float:
    """Nominal annual rate -> periodic monthly rate"""
    return annual_rate / 12


def amortized_payment(
    principal: float,
    months: int,
    annual_rate: float = DEFAULT_ANNUAL_INTEREST_RATE,
) -> float:
    """
    Equated monthly installment for a fixed-rate loan.

    Formula (r = annual_rate / 12, n = months):
        payment = P * r * (1 + r)^n / ((1 + r)^n - 1)
                = P * r / (1 - (1 + r)^-n)

    The second form is evaluated: (1 + r)^-n underflows to 0 for very long
    tenures instead of overflowing. A zero rate degenerates to straight-line
    repayment (P / n).

    Example:
        500,000 over 36 months at 10% -> ~16,133.59

    Raises:
        InvalidInputError: If months is not positive
    """
    if months <= 0:
        raise InvalidInputError(f"Tenure must be a positive number of months, got {months}")

    r = monthly_rate(annual_rate)
    if r == 0:
        return principal / months

    return principal * r / (1 - (1 + r) ** -months)


def principal_for_payment(
    payment: float,
    months: int,
    annual_rate: float = DEFAULT_ANNUAL_INTEREST_RATE,
) -> float:
    """
    Inverse of amortized_payment: the principal a given EMI pays off.

        P = M * (1 - (1 + r)^-n) / r
    """
    if months <= 0:
        raise InvalidInputError(f"Tenure must be a positive number of months, got {months}")

    r = monthly_rate(annual_rate)
    if r == 0:
        return payment * months

    return payment * (1 - (1 + r) ** -months) / r


def generate_amortization_schedule(
    principal: float,
    months: int,
    annual_rate: float = DEFAULT_ANNUAL_INTEREST_RATE,
) -> List[Installment]:
    """
    Month-by-month repayment schedule, amounts rounded to cents.

    Requirements:
    - Interest each month is charged on the outstanding balance
    - Every installment but the last pays the rounded EMI
    - Last installment absorbs the rounding drift so the balance ends at 0

    Returns:
        List of Installment rows numbered from 1
    """
    payment = round(amortized_payment(principal, months, annual_rate), 2)
    r = monthly_rate(annual_rate)

    balance = round(principal, 2)
    installments = []
    for number in range(1, months + 1):
        interest = round(balance * r, 2)

        if number == months:
            principal_part = balance
        else:
            principal_part = round(payment - interest, 2)

        balance = round(balance - principal_part, 2)
        installments.append(
            Installment(
                number=number,
                payment=round(principal_part + interest, 2),
                interest=interest,
                principal=principal_part,
                balance=balance,
            )
        )

    return installments
