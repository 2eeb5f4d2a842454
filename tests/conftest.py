from datetime import date, timedelta

import pytest

from schemas import Car, Rental


@pytest.fixture
def car():
    return Car(id=1, price_per_day=2000, price_per_km=10)


@pytest.fixture
def make_rental(car):
    def _make(days=1, distance=100, deductible_reduction=False, rental_id=1, start=date(2015, 12, 8)):
        return Rental(
            id=rental_id,
            car=car,
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            distance=distance,
            deductible_reduction=deductible_reduction,
        )
    return _make


@pytest.fixture
def document():
    return {
        "cars": [{"id": 1, "price_per_day": 2000, "price_per_km": 10}],
        "rentals": [
            {"id": 1, "car_id": 1, "start_date": "2015-12-8", "end_date": "2015-12-8",
             "distance": 100, "deductible_reduction": True},
            {"id": 2, "car_id": 1, "start_date": "2015-03-31", "end_date": "2015-04-01",
             "distance": 300},
        ],
        "rental_modifications": [
            {"id": 1, "rental_id": 1, "distance": 200},
            {"id": 2, "rental_id": 2, "start_date": "2015-04-01"},
        ],
    }
