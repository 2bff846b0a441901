"""
zapShift Backend — Abstract Payment Gateway Interface
=======================================================

What:  Contract for creating payment intents with an external processor.
Why:   The bridge never stores payment state; it only needs an opaque client
       secret the frontend uses to confirm the card payment. Tests
       substitute a fake gateway and assert on the minor-unit amount.
"""

from abc import ABC, abstractmethod


class PaymentGateway(ABC):
    """
    Contract:
        - amounts are integers in the currency's minor unit (cents)
        - returns the processor's client secret
        - every processor failure is wrapped in PaymentServiceError
    """

    @abstractmethod
    async def create_payment_intent(self, amount_minor: int) -> str:
        ...
