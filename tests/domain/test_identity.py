from __future__ import annotations

import pytest

from reviewlink.domain.identity import normalize_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Maria Lopez", "marialopez"),
        ("  maría  lópez ", "marialopez"),
        ("José Núñez", "josenunez"),
        ("O'Brien-Smith", "obriensmith"),
        ("Ｍａｒｉａ", "maria"),
        ("Agent 007", "agent007"),
    ],
)
def test_normalize_name_produces_comparison_key(raw: str, expected: str) -> None:
    assert normalize_name(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "!!!", "-- . --", "王伟"])
def test_normalize_name_returns_none_when_nothing_comparable_remains(raw: str | None) -> None:
    assert normalize_name(raw) is None


@pytest.mark.parametrize("raw", ["Zoë Ünal", "A.B. C", "mixed CASE 12"])
def test_normalize_name_is_idempotent(raw: str) -> None:
    key = normalize_name(raw)
    assert key is not None
    assert normalize_name(key) == key
