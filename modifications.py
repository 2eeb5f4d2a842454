import logging
from typing import List

from pricing import actions_from_amounts, check_balance, compute_settlement
from schemas import Action, RentalModification

logger = logging.getLogger(__name__)


def settlement_deltas(modification: RentalModification) -> dict:
    """
    What each party still has to pay or receive once the rental is modified.

    Both rentals are settled from scratch; the delta is the modified amount
    minus the amount already settled.
    """
    original = compute_settlement(modification.rental).amounts()
    modified = compute_settlement(modification.modified_rental).amounts()
    deltas = {who: modified[who] - original[who] for who in original}
    check_balance(deltas, f"modification {modification.id}")
    logger.debug("Modification %s of rental %s: %s", modification.id, modification.rental.id, deltas)
    return deltas


def generate_modification_actions(modification: RentalModification) -> List[Action]:
    return actions_from_amounts(settlement_deltas(modification))
