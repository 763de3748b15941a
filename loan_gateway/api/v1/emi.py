"""POST /v1/emi/quote - monthly installment quote with repayment schedule"""

from fastapi import APIRouter, Depends, HTTPException

from loan_gateway.api.v1.schemas import EmiQuoteRequest, EmiQuoteResponse, InstallmentSchema
from loan_gateway.api.dependencies import get_policy_dataset
from loan_gateway.domain.amortization import generate_amortization_schedule
from loan_gateway.domain.exceptions import UnknownProductError
from loan_gateway.domain.policy import PolicyDataset

router = APIRouter()


@router.post("/emi/quote", response_model=EmiQuoteResponse)
def quote_emi(request_body: EmiQuoteRequest, dataset: PolicyDataset = Depends(get_policy_dataset)):
    """
    Quote the EMI for a principal and tenure at the policy's interest rate.

    Does not check eligibility; product limits are only applied by
    POST /v1/assessment.
    """
    try:
        dataset.product_for(request_body.product_type)
    except UnknownProductError as e:
        raise HTTPException(status_code=422, detail=str(e))

    installments = generate_amortization_schedule(
        request_body.principal,
        request_body.tenure_months,
        dataset.annual_interest_rate,
    )
    total_payment = round(sum(inst.payment for inst in installments), 2)

    return EmiQuoteResponse(
        product_type=request_body.product_type,
        annual_interest_rate=dataset.annual_interest_rate,
        monthly_payment=installments[0].payment,
        total_payment=total_payment,
        total_interest=round(sum(inst.interest for inst in installments), 2),
        installments=[
            InstallmentSchema(
                number=inst.number,
                payment=inst.payment,
                interest=inst.interest,
                principal=inst.principal,
                balance=inst.balance,
            )
            for inst in installments
        ],
    )
