"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Policy dataset is structurally invalid (fatal at startup)"""

    pass


class PolicySourceError(DomainException):
    """Policy dataset could not be fetched from its remote source"""

    pass


class UnknownProductError(DomainException):
    """Applicant requested a product type the policy does not define"""

    def __init__(self, product_type: str):
        super().__init__(f"Unknown product type: {product_type!r}")
        self.product_type = product_type


class InvalidInputError(DomainException):
    """Applicant data violates the engine's input contract"""

    pass
