"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from loan_gateway.domain.policy import PolicyDataset


def get_correlation_id(request: Request) -> str:
    """Extract correlation ID from request state"""
    return getattr(request.state, "correlation_id", "unknown")


def get_policy_dataset(request: Request) -> PolicyDataset:
    """Provide the process-wide policy dataset loaded at startup"""
    dataset = getattr(request.app.state, "policy", None)
    if dataset is None:
        raise HTTPException(status_code=503, detail="Policy dataset not loaded")
    return dataset
