"""Errors raised while settling a batch of rentals. All of them abort the run."""


class SettlementError(Exception):
    """Base class for every error that stops a settlement run."""


class MalformedDocumentError(SettlementError):
    """The input is not valid JSON or does not match the expected schema (bad dates included)."""


class UnknownReferenceError(SettlementError):
    """A car_id or rental_id points at nothing."""


class InvalidRentalPeriodError(SettlementError):
    """A rental ends before it starts."""


class LedgerImbalanceError(SettlementError):
    """The per-party amounts of a settlement do not sum to zero."""


class DuplicateIdError(SettlementError):
    """Two cars or two rentals are declared with the same id."""
