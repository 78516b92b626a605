"""Domain-specific exceptions"""

from typing import List, Tuple


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction data is malformed or breaks a business rule"""

    pass


class BatchValidationError(DomainException):
    """One or more records in a batch failed validation"""

    def __init__(self, details: List[Tuple[int, str]]):
        super().__init__("Validation failed")
        self.details = details

    @property
    def first_error(self) -> str:
        return self.details[0][1]


class InvalidLimitsError(DomainException):
    """Limits data is malformed or inconsistent"""

    pass


class SmsParseError(DomainException):
    """SMS text is not a recognisable VF-Cash message"""

    pass
