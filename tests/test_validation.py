import pytest

from clinic.validation import normalize_cnp, validate_cnp, validate_email, validate_phone


@pytest.mark.parametrize(
    "cnp",
    [
        "1850101400017",
        "2950605123459",
        "1960315220045",
        "185 0101 400017",
        "1850101-400017",
    ],
)
def test_valid_cnp(cnp):
    assert validate_cnp(cnp)


@pytest.mark.parametrize(
    "cnp",
    [
        None,
        "",
        "1850101400018",  # check digit
        "185010140001",  # too short
        "18501014000170",  # too long
        "185010140001a",
        "9850101400017",  # sex/century digit
        "0850101400017",
        "1851301400017",  # month 13
        "1850230400017",  # 30 February
        "1850101000017",  # county 00
        "1850101530017",  # county 53
    ],
)
def test_invalid_cnp(cnp):
    assert not validate_cnp(cnp)


@pytest.mark.parametrize("email", ["ana@example.com", "Ion.Popescu+dent@clinic.co.ro"])
def test_valid_email(email):
    assert validate_email(email)


@pytest.mark.parametrize("email", ["", None, "ana@example", "ana.example.com", "ana @x.ro"])
def test_invalid_email(email):
    assert not validate_email(email)


@pytest.mark.parametrize("phone", ["0740123456", "+40740123456", "0740 123 456", "0740-123-456"])
def test_valid_phone(phone):
    assert validate_phone(phone)


@pytest.mark.parametrize("phone", ["", None, "12345", "074012345", "+41740123456", "07401234567"])
def test_invalid_phone(phone):
    assert not validate_phone(phone)


def test_normalize_cnp_drops_every_separator():
    assert normalize_cnp("2950605\t123459") == "2950605123459"
    assert normalize_cnp(" 295 0605-123459\n") == "2950605123459"
    assert validate_cnp("2950605\t123459")
