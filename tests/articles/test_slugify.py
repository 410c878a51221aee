import pytest

from utils import slugify


@pytest.mark.parametrize("title, expected", [
    ("Gérer son stress au quotidien", "gerer-son-stress-au-quotidien"),
    ("  Sommeil : 5 conseils !  ", "sommeil-5-conseils"),
    ("Œuvre d'été", "uvre-d-ete"),
    ("---", ""),
    ("", ""),
])
def test_slugify(title, expected) -> None:
    assert slugify(title) == expected
