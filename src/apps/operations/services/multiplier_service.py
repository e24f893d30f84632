# src/apps/operations/services/multiplier_service.py
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..models import MultiplierConfig


class MultiplierService:

    @staticmethod
    def resolve_value(raw) -> Decimal:
        """
        Turn free-form multiplier input into a value.

        Accepts a positive number, a multiplier name or its display label
        (``"Event (2.0x)"``). Anything unrecognised counts as 1.
        """
        text = str(raw).strip() if raw is not None else ''
        if not text:
            return Decimal('1')

        try:
            number = Decimal(text)
        except InvalidOperation:
            number = None
        if number is not None and number.is_finite() and number > 0:
            return number

        lowered = text.lower()
        active = list(MultiplierConfig.objects.filter(is_active=True))
        for multiplier in active:
            if multiplier.name.lower() == lowered:
                return multiplier.value
        for multiplier in active:
            if multiplier.label.lower() == lowered:
                return multiplier.value

        return Decimal('1')

    @staticmethod
    def top_active() -> Optional[MultiplierConfig]:
        return MultiplierConfig.objects.filter(is_active=True).order_by('-value').first()
