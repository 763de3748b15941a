"""Lending policy dataset - immutable rule tables validated once at load"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from loan_gateway.domain.exceptions import ConfigurationError, UnknownProductError

logger = logging.getLogger(__name__)

DEFAULT_ANNUAL_INTEREST_RATE = 0.10


@dataclass(frozen=True)
class AgeLimits:
    min: int
    max: int


@dataclass(frozen=True)
class CreditBand:
    """Credit score bucket: applies when score >= min_score"""

    name: str
    min_score: int
    score: int


@dataclass(frozen=True)
class DtiBand:
    """Debt-to-income bucket: applies when ratio <= threshold"""

    category: str
    threshold: float
    score: int


@dataclass(frozen=True)
class Product:
    """Loan product limits"""

    type: str
    max_principal: float
    min_tenure_months: int
    max_tenure_months: int


@dataclass(frozen=True)
class DecisionThresholds:
    approve_at: int
    reject_below: int


@dataclass(frozen=True)
class PolicyDataset:
    """
    Versioned policy rule tables.

    Structural invariants (checked by validate()):
    - credit_bands strictly descending by min_score, last band min_score == 0
    - dti_bands strictly ascending by threshold, last band threshold >= 1.0
    - product types are unique
    - 0 < reject_below < approve_at <= max_composite_score

    Band lookups are first-match in dataset order, so the ordering above is
    what makes the tightest band win.
    """

    version: str
    annual_interest_rate: float
    age_limits: AgeLimits
    credit_bands: Tuple[CreditBand, ...]
    dti_bands: Tuple[DtiBand, ...]
    products: Tuple[Product, ...]
    decision_thresholds: DecisionThresholds

    def __post_init__(self):
        self.validate()

    @property
    def max_composite_score(self) -> int:
        return max(b.score for b in self.credit_bands) + max(b.score for b in self.dti_bands)

    def band_for_credit_score(self, score: int) -> CreditBand:
        for band in self.credit_bands:
            if score >= band.min_score:
                return band
        return self.credit_bands[-1]

    def band_for_dti_ratio(self, ratio: float) -> DtiBand:
        for band in self.dti_bands:
            if ratio <= band.threshold:
                return band
        # Ratios above the catch-all threshold still land in the catch-all
        return self.dti_bands[-1]

    def product_for(self, product_type: str) -> Product:
        for product in self.products:
            if product.type == product_type:
                return product
        raise UnknownProductError(product_type)

    def validate(self) -> None:
        """Raise ConfigurationError if any structural invariant is violated"""
        if not self.version:
            raise ConfigurationError("Policy version must be a non-empty string")

        if self.annual_interest_rate < 0:
            raise ConfigurationError("annual_interest_rate must not be negative")

        if self.age_limits.min >= self.age_limits.max:
            raise ConfigurationError(
                f"age_limits.min ({self.age_limits.min}) must be below max ({self.age_limits.max})"
            )

        self._validate_credit_bands()
        self._validate_dti_bands()
        self._validate_products()
        self._validate_thresholds()

    def _validate_credit_bands(self) -> None:
        if not self.credit_bands:
            raise ConfigurationError("credit_bands must not be empty")

        for previous, current in zip(self.credit_bands, self.credit_bands[1:]):
            if current.min_score >= previous.min_score:
                raise ConfigurationError(
                    "credit_bands must be sorted strictly descending by min_score "
                    f"({previous.name!r} {previous.min_score} -> {current.name!r} {current.min_score})"
                )

        if self.credit_bands[-1].min_score != 0:
            raise ConfigurationError("credit_bands must end with a catch-all band with min_score 0")

        if any(b.score < 0 for b in self.credit_bands):
            raise ConfigurationError("credit band scores must not be negative")

    def _validate_dti_bands(self) -> None:
        if not self.dti_bands:
            raise ConfigurationError("dti_bands must not be empty")

        if self.dti_bands[0].threshold <= 0:
            raise ConfigurationError("dti band thresholds must be positive")

        for previous, current in zip(self.dti_bands, self.dti_bands[1:]):
            if current.threshold <= previous.threshold:
                raise ConfigurationError(
                    "dti_bands must be sorted strictly ascending by threshold "
                    f"({previous.category!r} {previous.threshold} -> {current.category!r} {current.threshold})"
                )

        if self.dti_bands[-1].threshold < 1.0:
            raise ConfigurationError("dti_bands must end with a catch-all band with threshold >= 1.0")

        if any(b.score < 0 for b in self.dti_bands):
            raise ConfigurationError("dti band scores must not be negative")

    def _validate_products(self) -> None:
        if not self.products:
            raise ConfigurationError("products must not be empty")

        seen = set()
        for product in self.products:
            if product.type in seen:
                raise ConfigurationError(f"Duplicate product type: {product.type!r}")
            seen.add(product.type)

            if product.max_principal <= 0:
                raise ConfigurationError(f"Product {product.type!r}: max_principal must be positive")
            if product.min_tenure_months <= 0:
                raise ConfigurationError(f"Product {product.type!r}: min_tenure_months must be positive")
            if product.min_tenure_months > product.max_tenure_months:
                raise ConfigurationError(
                    f"Product {product.type!r}: min_tenure_months exceeds max_tenure_months"
                )

    def _validate_thresholds(self) -> None:
        thresholds = self.decision_thresholds
        if thresholds.reject_below <= 0 or thresholds.approve_at <= 0:
            raise ConfigurationError("decision thresholds must be positive")
        if thresholds.reject_below >= thresholds.approve_at:
            raise ConfigurationError(
                f"reject_below ({thresholds.reject_below}) must be below approve_at ({thresholds.approve_at})"
            )
        if thresholds.approve_at > self.max_composite_score:
            raise ConfigurationError(
                f"approve_at ({thresholds.approve_at}) exceeds the maximum attainable "
                f"composite score ({self.max_composite_score})"
            )


def parse_policy_dataset(data: Mapping[str, Any]) -> PolicyDataset:
    """
    Build a validated PolicyDataset from its JSON representation.

    Expected shape:
        {
          "version": "2024.1",
          "annual_interest_rate": 0.10,
          "age_limits": {"min": 21, "max": 60},
          "credit_bands": [{"band": "excellent", "min_score": 750, "score": 50}, ...],
          "dti_bands": [{"category": "safe", "threshold": 0.4, "score": 50}, ...],
          "products": [{"type": "Personal", "max_principal": 1500000,
                        "min_tenure_months": 12, "max_tenure_months": 60}, ...],
          "decision_thresholds": {"approve_at": 70, "reject_below": 40}
        }

    Raises:
        ConfigurationError: On missing keys, wrong types, or broken invariants
    """
    try:
        return PolicyDataset(
            version=str(data["version"]),
            annual_interest_rate=float(data.get("annual_interest_rate", DEFAULT_ANNUAL_INTEREST_RATE)),
            age_limits=AgeLimits(
                min=_as_int(data["age_limits"]["min"]),
                max=_as_int(data["age_limits"]["max"]),
            ),
            credit_bands=tuple(
                CreditBand(
                    name=str(band["band"]),
                    min_score=_as_int(band["min_score"]),
                    score=_as_int(band["score"]),
                )
                for band in data["credit_bands"]
            ),
            dti_bands=tuple(
                DtiBand(
                    category=str(band["category"]),
                    threshold=float(band["threshold"]),
                    score=_as_int(band["score"]),
                )
                for band in data["dti_bands"]
            ),
            products=tuple(
                Product(
                    type=str(product["type"]),
                    max_principal=float(product["max_principal"]),
                    min_tenure_months=_as_int(product["min_tenure_months"]),
                    max_tenure_months=_as_int(product["max_tenure_months"]),
                )
                for product in data["products"]
            ),
            decision_thresholds=DecisionThresholds(
                approve_at=_as_int(data["decision_thresholds"]["approve_at"]),
                reject_below=_as_int(data["decision_thresholds"]["reject_below"]),
            ),
        )
    except KeyError as e:
        raise ConfigurationError(f"Policy dataset missing required field: {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Policy dataset has an invalid value: {e}") from e


def load_policy_dataset(path: Path | str) -> PolicyDataset:
    """Read and validate a policy dataset from a JSON file"""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy dataset {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Policy dataset {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Policy dataset {path} must be a JSON object")

    dataset = parse_policy_dataset(data)
    logger.info("Policy dataset loaded", extra={"policy_version": dataset.version, "source": str(path)})
    return dataset


def policy_to_dict(dataset: PolicyDataset) -> Dict[str, Any]:
    """Serialize a dataset back to its JSON representation"""
    return {
        "version": dataset.version,
        "annual_interest_rate": dataset.annual_interest_rate,
        "age_limits": {"min": dataset.age_limits.min, "max": dataset.age_limits.max},
        "credit_bands": [
            {"band": b.name, "min_score": b.min_score, "score": b.score} for b in dataset.credit_bands
        ],
        "dti_bands": [
            {"category": b.category, "threshold": b.threshold, "score": b.score} for b in dataset.dti_bands
        ],
        "products": [
            {
                "type": p.type,
                "max_principal": p.max_principal,
                "min_tenure_months": p.min_tenure_months,
                "max_tenure_months": p.max_tenure_months,
            }
            for p in dataset.products
        ],
        "decision_thresholds": {
            "approve_at": dataset.decision_thresholds.approve_at,
            "reject_below": dataset.decision_thresholds.reject_below,
        },
    }


def _as_int(value: Any) -> int:
    # Reject bools and fractional floats
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)
