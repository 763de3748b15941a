"""GET /v1/policy - active lending policy dataset"""

from fastapi import APIRouter, Depends

from loan_gateway.api.v1.schemas import PolicyResponse
from loan_gateway.api.dependencies import get_policy_dataset
from loan_gateway.domain.policy import PolicyDataset, policy_to_dict

router = APIRouter()


@router.get("/policy", response_model=PolicyResponse)
def get_policy(dataset: PolicyDataset = Depends(get_policy_dataset)):
    """
    Return the policy loaded at startup.

    Used by the data-collection wizard to list products and tenure ranges.
    """
    return PolicyResponse(**policy_to_dict(dataset))
