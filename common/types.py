from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Decimals stay exact inside the app and leave as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Quantity = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
