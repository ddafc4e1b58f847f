from __future__ import annotations

import pytest

from gatherer_ingest.engine.symbols import decode_mana_label, is_recognised


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Black", "B"),
        ("Blue", "U"),
        ("white", "W"),
        ("Black or White", "B/W"),
        ("Two or Red", "2/R"),
        ("Phyrexian Black", "BP"),
        ("Phyrexian Green", "GP"),
        ("Variable Colorless", "X"),
        ("Colorless", "C"),
        ("Two", "2"),
        ("Ten", "10"),
        ("7", "7"),
        ("15", "15"),
    ],
)
def test_decode_mana_label(label: str, expected: str) -> None:
    assert decode_mana_label(label) == expected


def test_unknown_label_passes_through_normalised() -> None:
    assert decode_mana_label("Snow") == "SNOW"
    assert decode_mana_label(" half red ") == "HALF_RED"


def test_is_recognised_flags_passthrough() -> None:
    assert is_recognised("Black or Red", decode_mana_label("Black or Red"))
    assert not is_recognised("Snow", decode_mana_label("Snow"))
