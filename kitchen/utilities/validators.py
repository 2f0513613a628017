"""
Input validation schema for new line items, using Pydantic.
"""
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from kitchen.utilities.constants import DEFAULT_UNIT


class LineItemInput(BaseModel):
    """Schema for the raw values a user types in for one ingredient."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    cost_per_unit: float = Field(..., ge=0, allow_inf_nan=False)
    quantity_used: float = Field(..., gt=0, allow_inf_nan=False)
    unit: str = DEFAULT_UNIT

    @field_validator('cost_per_unit', 'quantity_used', mode='before')
    @classmethod
    def parse_number(cls, v):
        """Accept numbers or numeric strings; reject blanks and booleans."""
        if isinstance(v, bool) or v is None:
            raise ValueError('Input should be a number')
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError('Input should be a number')
        if isinstance(v, Decimal):
            return float(v)
        return v

    @field_validator('unit', mode='before')
    @classmethod
    def default_unit(cls, v):
        """Blank or missing unit falls back to the default label."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_UNIT
        return v
