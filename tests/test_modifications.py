from datetime import date

from modifications import generate_modification_actions, settlement_deltas
from schemas import Party, RentalModification


def test_modified_rental_keeps_car_and_option(make_rental):
    rental = make_rental(days=2, deductible_reduction=True)
    modification = RentalModification.build(1, rental, distance=500)
    modified = modification.modified_rental
    assert modified.car is rental.car
    assert modified.deductible_reduction is True
    assert modified.distance == 500
    assert (modified.start_date, modified.end_date) == (rental.start_date, rental.end_date)
    assert rental.distance == 100


def test_zero_distance_override_is_applied(make_rental):
    modification = RentalModification.build(1, make_rental(distance=100), distance=0)
    assert modification.modified_rental.distance == 0


def test_distance_increase(make_rental):
    modification = RentalModification.build(1, make_rental(days=1, distance=100), distance=200)
    deltas = settlement_deltas(modification)
    assert deltas[Party.DRIVER] == -1000
    assert deltas[Party.ASSISTANCE] == 0
    assert deltas[Party.INSURANCE] == 150
    assert deltas[Party.OWNER] == 700
    assert deltas[Party.PLATFORM] == 150


def test_distance_increase_actions(make_rental):
    modification = RentalModification.build(1, make_rental(days=1, distance=100), distance=200)
    actions = [(a.who.value, a.type, a.amount) for a in generate_modification_actions(modification)]
    assert actions == [
        ("driver", "debit", 1000),
        ("owner", "credit", 700),
        ("insurance", "credit", 150),
        ("assistance", "debit", 0),
        ("drivy", "credit", 150),
    ]


def test_shorter_rental_refunds_the_driver(make_rental):
    rental = make_rental(days=2, distance=300, start=date(2015, 3, 31))
    modification = RentalModification.build(2, rental, start_date=date(2015, 4, 1))
    actions = [(a.who.value, a.type, a.amount) for a in generate_modification_actions(modification)]
    assert actions == [
        ("driver", "credit", 1800),
        ("owner", "debit", 1260),
        ("insurance", "debit", 270),
        ("assistance", "debit", 100),
        ("drivy", "debit", 170),
    ]


def test_no_change_yields_zero_debits(make_rental):
    modification = RentalModification.build(1, make_rental(days=4, distance=50))
    actions = generate_modification_actions(modification)
    assert all(a.type == "debit" and a.amount == 0 for a in actions)


def test_deltas_sum_to_zero(make_rental):
    rental = make_rental(days=3, distance=120, deductible_reduction=True)
    for modification in [
        RentalModification.build(1, rental, end_date=date(2015, 12, 25)),
        RentalModification.build(2, rental, start_date=date(2015, 12, 9), distance=999),
        RentalModification.build(3, rental, distance=0),
    ]:
        assert sum(settlement_deltas(modification).values()) == 0
