from datetime import date, datetime

import numpy as np
import pytest

from mfxirr.utils import as_date, compose, is_empty, safe_div, to_double


def test_safe_div():
    assert safe_div(4) == 0.25
    assert safe_div(0) == 0.0


def test_to_double():
    assert to_double("1,234.5") == 1234.5
    assert to_double(np.float64(2.5)) == 2.5
    assert to_double(" 7 ") == 7.0
    assert to_double("N.A.") == 0.0


def test_compose_and_is_empty():
    assert compose(len, str)(12345) == 5
    assert is_empty([]) and is_empty(None) and not is_empty((1,))


def test_as_date():
    assert as_date("2021-03-04") == date(2021, 3, 4)
    assert as_date(datetime(2021, 3, 4, 12, 0)) == date(2021, 3, 4)
    assert as_date("04-Mar-2021", "%d-%b-%Y") == date(2021, 3, 4)
    with pytest.raises(ValueError):
        as_date(20210304)
