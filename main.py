import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from pydantic import ValidationError

import config
from errors import DuplicateIdError, MalformedDocumentError, SettlementError, UnknownReferenceError
from modifications import generate_modification_actions
from pricing import compute_settlement, generate_actions, rental_duration
from schemas import (
    Car,
    CarRecord,
    Commission,
    InputDocument,
    Options,
    Rental,
    RentalActions,
    RentalCommission,
    RentalModification,
    RentalModificationActions,
    RentalModificationRecord,
    RentalModificationsDocument,
    RentalPrice,
    RentalRecord,
    RentalsDocument,
)

logger = logging.getLogger(__name__)


# Loading
def parse_document(raw: str) -> InputDocument:
    try:
        return InputDocument.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Invalid JSON: {e}") from e
    except ValidationError as e:
        raise MalformedDocumentError(f"Invalid document: {e}") from e


def load_document(path: str) -> InputDocument:
    with open(path, encoding="utf-8") as f:
        return parse_document(f.read())


# Registries keyed by id
def build_catalog(records: List[CarRecord]) -> Dict[int, Car]:
    cars: Dict[int, Car] = {}
    for record in records:
        if record.id in cars:
            raise DuplicateIdError(f"Car {record.id} is declared twice")
        cars[record.id] = Car(**record.model_dump())
    return cars


def build_rentals(records: List[RentalRecord], cars: Dict[int, Car]) -> Dict[int, Rental]:
    rentals: Dict[int, Rental] = {}
    for record in records:
        if record.id in rentals:
            raise DuplicateIdError(f"Rental {record.id} is declared twice")
        car = cars.get(record.car_id)
        if car is None:
            raise UnknownReferenceError(f"Rental {record.id} references unknown car {record.car_id}")
        rental = Rental(
            id=record.id,
            car=car,
            start_date=record.start_date,
            end_date=record.end_date,
            distance=record.distance,
            deductible_reduction=record.deductible_reduction,
        )
        rental_duration(rental)
        rentals[record.id] = rental
    return rentals


def build_modifications(
    records: List[RentalModificationRecord], rentals: Dict[int, Rental]
) -> List[RentalModification]:
    modifications = []
    for record in records:
        rental = rentals.get(record.rental_id)
        if rental is None:
            raise UnknownReferenceError(
                f"Modification {record.id} references unknown rental {record.rental_id}"
            )
        modifications.append(
            RentalModification.build(
                record.id,
                rental,
                start_date=record.start_date,
                end_date=record.end_date,
                distance=record.distance,
            )
        )
    return modifications


# Output rendering
def rental_price(rental: Rental) -> RentalPrice:
    return RentalPrice(id=rental.id, price=compute_settlement(rental).price)


def rental_commission(rental: Rental) -> RentalCommission:
    settlement = compute_settlement(rental)
    return RentalCommission(
        id=rental.id,
        price=settlement.price,
        options=Options(deductible_reduction=settlement.deductible_reduction_fee),
        commission=Commission(
            insurance_fee=settlement.insurance_fee,
            assistance_fee=settlement.assistance_fee,
            drivy_fee=settlement.platform_fee,
        ),
    )


def rental_actions(rental: Rental) -> RentalActions:
    return RentalActions(id=rental.id, actions=generate_actions(rental))


RENTAL_RENDERERS = {
    "prices": rental_price,
    "commissions": rental_commission,
    "actions": rental_actions,
}


def compute_output(document: InputDocument, mode: str) -> dict:
    """Settle the whole document. Nothing is returned unless every record settles."""
    if mode not in config.OUTPUT_MODES:
        raise ValueError(f"Unknown output mode: {mode}")

    cars = build_catalog(document.cars)
    rentals = build_rentals(document.rentals, cars)
    modifications = build_modifications(document.rental_modifications, rentals)

    if mode == "modifications":
        output = RentalModificationsDocument(
            rental_modifications=[
                RentalModificationActions(
                    id=modification.id,
                    rental_id=modification.rental.id,
                    actions=generate_modification_actions(modification),
                )
                for modification in modifications
            ]
        )
    else:
        render = RENTAL_RENDERERS[mode]
        output = RentalsDocument(rentals=[render(rental) for rental in rentals.values()])
    return output.model_dump(mode="json")


def serialize_output(output: dict) -> str:
    return json.dumps(output, indent=2) + "\n"


def run(input_path: str, output_path: str, mode: str, expected_path: Optional[str] = None) -> int:
    try:
        document = load_document(input_path)
        output = compute_output(document, mode)
    except (OSError, SettlementError) as e:
        logger.error("Settlement aborted, nothing written: %s", e)
        return 1

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(serialize_output(output))
    logger.info(
        "Settled %s rentals and %s modifications (%s mode) into %s",
        len(document.rentals),
        len(document.rental_modifications),
        mode,
        output_path,
    )

    if expected_path:
        try:
            with open(expected_path, encoding="utf-8") as f:
                expected = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Cannot read expected output %s: %s", expected_path, e)
            return 1
        if expected != output:
            logger.error("Computed output %s differs from %s", output_path, expected_path)
            return 2
        logger.info("Computed output matches %s", expected_path)
    return 0


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Price and settle car-sharing rentals")
    parser.add_argument("--input", default=config.INPUT_PATH,
                        help="Input document with cars, rentals and rental_modifications")
    parser.add_argument("--output", default=config.OUTPUT_PATH, help="Where to write the computed document")
    parser.add_argument("--mode", choices=config.OUTPUT_MODES, default=config.OUTPUT_MODE,
                        help="Shape of the output document")
    parser.add_argument("--expected", default=None,
                        help="Expected output document to compare the computed one against")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, type=str.upper, choices=LOG_LEVELS)
    args = parser.parse_args(argv)

    # defaults come from the environment and skip the choices check
    if args.mode not in config.OUTPUT_MODES:
        parser.error(f"invalid output mode: {args.mode!r} (choose from {', '.join(config.OUTPUT_MODES)})")
    args.log_level = args.log_level.upper()
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level: {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    return run(args.input, args.output, args.mode, args.expected)


if __name__ == "__main__":
    sys.exit(main())
