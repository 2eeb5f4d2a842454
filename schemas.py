"""
Settlement Schemas

Car-sharing settlement schemas using Pydantic models.
Domain records are immutable once built:
- Car -> supply side, read-only catalog entry
- Rental -> demand side, shares its Car by reference
- RentalModification -> a later change to the dates or distance of a Rental
- Settlement -> every money figure derived from one Rental
- Action -> one credit or debit for one party

The *Document models describe the JSON documents read and written by the CLI.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from config import PLATFORM_LABEL


def parse_calendar_date(value):
    # accepts "2015-12-8" as well as "2015-12-08"
    if isinstance(value, str):
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            raise ValueError(f"invalid calendar date: {value!r}")
    return value


CalendarDate = Annotated[date, BeforeValidator(parse_calendar_date)]


class Party(str, Enum):
    DRIVER = "driver"
    OWNER = "owner"
    INSURANCE = "insurance"
    ASSISTANCE = "assistance"
    PLATFORM = PLATFORM_LABEL


class Car(BaseModel):
    """
    Cars available on the marketplace
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Catalog identifier")
    price_per_day: int = Field(..., ge=0, description="Daily rate, in cents")
    price_per_km: int = Field(..., ge=0, description="Distance rate, in cents")


class Rental(BaseModel):
    """
    A car rented between two calendar dates, both included
    """
    model_config = ConfigDict(frozen=True)

    id: int
    car: Car
    start_date: date
    end_date: date
    distance: int = Field(..., ge=0, description="Kilometers traveled")
    deductible_reduction: bool = Field(False, description="Deductible reduction option")


class RentalModification(BaseModel):
    """
    Change of start date, end date or distance of an existing rental.
    The modified rental is built once, when the modification is created.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    rental: Rental
    modified_rental: Rental

    @classmethod
    def build(
        cls,
        id: int,
        rental: Rental,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        distance: Optional[int] = None,
    ) -> "RentalModification":
        overrides = {"start_date": start_date, "end_date": end_date, "distance": distance}
        modified = rental.model_copy(update={k: v for k, v in overrides.items() if v is not None})
        return cls(id=id, rental=rental, modified_rental=modified)


class Settlement(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration: int
    price_time_component: int
    price_distance_component: int
    price: int
    deductible_reduction_fee: int
    insurance_fee: int
    assistance_fee: int
    platform_fee: int

    @property
    def driver_amount(self) -> int:
        return -self.price - self.deductible_reduction_fee

    @property
    def owner_amount(self) -> int:
        return self.price - self.insurance_fee - self.assistance_fee - self.platform_fee

    @property
    def insurance_amount(self) -> int:
        return self.insurance_fee

    @property
    def assistance_amount(self) -> int:
        return self.assistance_fee

    @property
    def platform_amount(self) -> int:
        return self.platform_fee + self.deductible_reduction_fee

    def amounts(self) -> dict:
        """Signed amount per party; positive means the party receives money."""
        return {
            Party.DRIVER: self.driver_amount,
            Party.OWNER: self.owner_amount,
            Party.INSURANCE: self.insurance_amount,
            Party.ASSISTANCE: self.assistance_amount,
            Party.PLATFORM: self.platform_amount,
        }


class Action(BaseModel):
    """
    How much money must be debited or credited for one party
    """
    who: Party
    type: Literal["credit", "debit"]
    amount: int = Field(..., ge=0)

    @classmethod
    def from_amount(cls, who: Party, amount: int) -> "Action":
        # zero is a debit
        return cls(who=who, type="credit" if amount > 0 else "debit", amount=abs(amount))


# Input document
class CarRecord(BaseModel):
    id: int
    price_per_day: int = Field(..., ge=0)
    price_per_km: int = Field(..., ge=0)


class RentalRecord(BaseModel):
    id: int
    car_id: int
    start_date: CalendarDate
    end_date: CalendarDate
    distance: int = Field(..., ge=0)
    deductible_reduction: bool = False


class RentalModificationRecord(BaseModel):
    id: int
    rental_id: int
    start_date: Optional[CalendarDate] = None
    end_date: Optional[CalendarDate] = None
    distance: Optional[int] = Field(None, ge=0)


class InputDocument(BaseModel):
    cars: List[CarRecord]
    rentals: List[RentalRecord]
    rental_modifications: List[RentalModificationRecord] = Field(default_factory=list)


# Output documents
class Options(BaseModel):
    deductible_reduction: int


class Commission(BaseModel):
    insurance_fee: int
    assistance_fee: int
    drivy_fee: int


class RentalPrice(BaseModel):
    id: int
    price: int


class RentalCommission(BaseModel):
    id: int
    price: int
    options: Options
    commission: Commission


class RentalActions(BaseModel):
    id: int
    actions: List[Action]


class RentalModificationActions(BaseModel):
    id: int
    rental_id: int
    actions: List[Action]


class RentalsDocument(BaseModel):
    rentals: List[Union[RentalPrice, RentalCommission, RentalActions]]


class RentalModificationsDocument(BaseModel):
    rental_modifications: List[RentalModificationActions]
