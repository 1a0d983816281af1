"""Generation of SKUs, warehouse/zone codes and EAN-13 barcodes.

Every generator builds a deterministic base value and then probes a
uniqueness oracle (``exists(candidate) -> bool``) until it finds a free
value. Nothing here writes to the database; the caller persists the
returned identifier inside its own transaction.
"""

import logging
import random
import re
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stock_ledger.config import settings
from stock_ledger.exceptions import IdentifierExhaustedError, InternalError
from stock_ledger.services import lookup_service

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

EAN13_LOW = 10**11
EAN13_HIGH = 10**12

ExistsFn = Callable[[str], bool]


def sanitize_and_shorten(value: str | None, max_length: int) -> str:
    """Strip non-alphanumerics, upper-case and cut to ``max_length``."""
    if value is None or not value.strip():
        return ""
    return _NON_ALNUM.sub("", value).upper()[:max_length]


def _probe(exists: ExistsFn, candidate: str) -> bool:
    try:
        return exists(candidate)
    except SQLAlchemyError as e:
        raise InternalError(f"Uniqueness check failed for '{candidate}': {e}") from e


def first_unused(base: str, exists: ExistsFn, width: int, max_attempts: int | None = None) -> str:
    """Return ``base`` if free, else the first free ``base-001``, ``base-002``, ...

    ``width`` is the zero-padding of the numeric suffix. ``max_attempts``
    counts every oracle call including the one for ``base``; 0 disables the
    bound.
    """
    if max_attempts is None:
        max_attempts = settings.IDENTIFIER_MAX_ATTEMPTS

    if not _probe(exists, base):
        return base

    counter = 1
    while True:
        if max_attempts and counter >= max_attempts:
            raise IdentifierExhaustedError(
                f"No free identifier for base '{base}' after {max_attempts} attempts"
            )
        candidate = f"{base}-{counter:0{width}d}"
        if not _probe(exists, candidate):
            if counter > 1:
                logger.info("Identifier base %s needed %d probes", base, counter + 1)
            return candidate
        counter += 1


# --- Base builders ---

def build_base_sku(category_name: str | None, product_name: str | None, unit_abbreviation: str | None) -> str:
    """("Electronics", "Game Mouse", "PCS") -> "ELE-GAMEMO-PCS"."""
    return "-".join([
        sanitize_and_shorten(category_name, 3),
        sanitize_and_shorten(product_name, 6),
        sanitize_and_shorten(unit_abbreviation, 3),
    ])


def build_base_warehouse_code(name: str | None) -> str:
    """("Main Warehouse North") -> "MAINWAREHO"."""
    return sanitize_and_shorten(name, 10) or "WH"


def build_base_zone_code(warehouse_code: str, zone_name: str | None) -> str:
    """("WH-MAIN", "Receiving") -> "WH-MAIN-RECE"."""
    return f"{warehouse_code}-{sanitize_and_shorten(zone_name, 4)}"


# --- EAN-13 ---

def ean13_check_digit(digits12: str) -> int:
    if len(digits12) != 12 or not digits12.isdigit():
        raise ValueError(f"EAN-13 payload must be 12 digits, got '{digits12}'")
    sum_odd = sum(int(d) for d in digits12[0::2])
    sum_even = sum(int(d) for d in digits12[1::2])
    return (10 - (sum_odd + 3 * sum_even) % 10) % 10


def is_valid_ean13(code: str) -> bool:
    if len(code) != 13 or not code.isdigit():
        return False
    return ean13_check_digit(code[:12]) == int(code[12])


def random_ean13(rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    payload = str(rng.randrange(EAN13_LOW, EAN13_HIGH))
    return f"{payload}{ean13_check_digit(payload)}"


def unique_ean13(exists: ExistsFn, rng: random.Random | None = None, max_attempts: int | None = None) -> str:
    if max_attempts is None:
        max_attempts = settings.IDENTIFIER_MAX_ATTEMPTS
    attempts = 0
    while True:
        attempts += 1
        code = random_ean13(rng)
        if not _probe(exists, code):
            return code
        logger.warning("Barcode collision on %s (attempt %d)", code, attempts)
        if max_attempts and attempts >= max_attempts:
            raise IdentifierExhaustedError(f"No free EAN-13 barcode after {max_attempts} attempts")


# --- Database-backed generators ---

def generate_sku(db: Session, category_name: str | None, product_name: str | None, unit_abbreviation: str | None) -> str:
    base = build_base_sku(category_name, product_name, unit_abbreviation)
    return first_unused(base, lambda s: lookup_service.sku_exists(db, s), width=3)


def generate_warehouse_code(db: Session, name: str | None) -> str:
    base = build_base_warehouse_code(name)
    return first_unused(base, lambda s: lookup_service.warehouse_code_exists(db, s), width=3)


def generate_zone_code(db: Session, warehouse_code: str, zone_name: str | None) -> str:
    base = build_base_zone_code(warehouse_code, zone_name)
    return first_unused(base, lambda s: lookup_service.zone_code_exists(db, s), width=2)


def generate_ean13_barcode(db: Session) -> str:
    return unique_ean13(lambda s: lookup_service.barcode_exists(db, s))
