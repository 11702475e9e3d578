# clinic/validation.py
from __future__ import annotations

import re
from datetime import date

CNP_WEIGHTS = [2, 7, 9, 1, 4, 6, 3, 5, 8, 2, 7, 9]

# First digit -> century of the birth year. 7/8 are residents/foreigners.
_CENTURY = {1: 1900, 2: 1900, 3: 1800, 4: 1800, 5: 2000, 6: 2000, 7: 2000, 8: 2000}

EMAIL_REGEX = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
PHONE_REGEX = re.compile(r"^(\+40|0)[0-9]{9}$")

_SEPARATORS = re.compile(r"[\s-]")


def _is_valid_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def normalize_cnp(cnp: str) -> str:
    """Drop the spaces, tabs and dashes people type inside a CNP."""
    return _SEPARATORS.sub("", cnp)


def validate_cnp(cnp) -> bool:
    """
    Validate a Romanian CNP (13 digits: sex/century, YYMMDD, county,
    serial, check digit).
    """
    if not cnp or not isinstance(cnp, str):
        return False

    cnp = normalize_cnp(cnp)
    if not re.fullmatch(r"\d{13}", cnp):
        return False

    first = int(cnp[0])
    if first not in _CENTURY:
        return False

    year = _CENTURY[first] + int(cnp[1:3])
    month = int(cnp[3:5])
    day = int(cnp[5:7])
    if not _is_valid_date(year, month, day):
        return False

    county = int(cnp[7:9])
    if county < 1 or county > 52:
        return False

    check = sum(int(d) * w for d, w in zip(cnp[:12], CNP_WEIGHTS)) % 11
    if check == 10:
        check = 1
    return check == int(cnp[12])


def validate_email(email) -> bool:
    return bool(email) and EMAIL_REGEX.match(email) is not None


def validate_phone(phone) -> bool:
    """Romanian numbers: +40xxxxxxxxx or 0xxxxxxxxx."""
    if not phone:
        return False
    return PHONE_REGEX.match(_SEPARATORS.sub("", phone)) is not None
