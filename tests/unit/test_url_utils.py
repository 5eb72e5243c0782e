"""Unit tests for URL helpers"""

import pytest

from paylike_client.utils.url_utils import build_path, limit_params


def test_build_path_fills_segments():
    assert build_path("/merchants/{merchant_id}/users/{user_id}", merchant_id="m1", user_id="u1") == (
        "/merchants/m1/users/u1"
    )


def test_build_path_encodes_segments():
    assert build_path("/cards/{card_id}", card_id="a/b c") == "/cards/a%2Fb%20c"


def test_build_path_rejects_empty_segment():
    with pytest.raises(ValueError):
        build_path("/merchants/{merchant_id}", merchant_id="")


def test_limit_params():
    assert limit_params(5) == {"limit": 5}


@pytest.mark.parametrize("limit", [0, -1, True, 2.5, "5"])
def test_limit_params_rejects_non_positive_or_non_int(limit):
    with pytest.raises(ValueError):
        limit_params(limit)
