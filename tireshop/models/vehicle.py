from typing import Optional

from pydantic import BaseModel, Field


class VehicleSelection(BaseModel):
    """The year/make/model/trim tuple collected by the vehicle finder."""

    year: str = ""
    make: str = ""
    model: str = ""
    trim: str = ""

    @property
    def is_complete(self) -> bool:
        return all([self.year, self.make, self.model, self.trim])

    @property
    def year_int(self) -> Optional[int]:
        try:
            return int(self.year)
        except (TypeError, ValueError):
            return None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.year, self.make, self.model) if p)


class TireSize(BaseModel):
    """A parsed ``225/65R17`` style size."""

    width: str
    aspect_ratio: str
    construction: str
    diameter: str

    def __str__(self) -> str:
        return f"{self.width}/{self.aspect_ratio}{self.construction}{self.diameter}"


class TireOption(BaseModel):
    id: int
    brand: str
    model: str
    season: str
    price: str  # display price per tire, e.g. "$189"
    rating: float
    in_stock: bool = True
    category: str  # "Premium", "Mid-Range", "Budget"


class TireResult(BaseModel):
    vehicle: VehicleSelection
    tire_size: str
    front_tire_size: str
    rear_tire_size: str
    size_parts: TireSize
    verified: bool = False  # model confirmed by the vehicle data provider
    advisory: Optional[str] = None
    options: list[TireOption] = Field(default_factory=list)


class OptionList(BaseModel):
    """Options for one wizard step; ``error`` is set when the lookup failed."""

    options: list[str] = Field(default_factory=list)
    error: Optional[str] = None
