"""Space model - static space attributes for the space-only certificate flow."""

from typing import Optional
from pydantic import BaseModel, Field


class Space(BaseModel):
    """Row in the spaces table."""
    id: Optional[str] = None
    name: str = Field(..., description="Display name, e.g. 'Cozy T1 in Arroios'")
    address_label: Optional[str] = None
    city: str
    country: Optional[str] = None
    neighborhood: Optional[str] = None
    property_type: str = Field(..., description="T0-T4, Studio, Loft, Duplex")
    floor: str = Field(..., description="basement, ground, 1-5, 6+ or attic")
    area_m2: float = Field(..., gt=0)
    listing_price: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def location_label(self) -> str:
        return self.neighborhood or self.city
