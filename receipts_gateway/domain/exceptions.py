"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Payment request is malformed: empty selection, missing method, bad amount or reference"""

    pass


class InsufficientCreditBalance(DomainException):
    """Requested credit balance draw exceeds the client's available credit"""

    def __init__(self, requested, available):
        self.requested = requested
        self.available = available
        super().__init__(f"Credit balance draw of {requested} exceeds available credit of {available}")


class ExcessPayment(DomainException):
    """Requested funds exceed the total debt of the selected invoices"""

    def __init__(self, excess):
        self.excess = excess
        super().__init__(f"Payment exceeds selected invoices' debt by {excess}")


class NotFound(DomainException):
    """Invoice, client, payment or receipt does not exist"""

    pass
