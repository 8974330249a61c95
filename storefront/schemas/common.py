from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Money goes over the wire as a fixed two-place string, e.g. "25.00"
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: f"{value:.2f}", return_type=str, when_used="json"),
]
