from __future__ import annotations

from strataview.config.schema import NameConfig
from strataview.wells.names import NameReconciler


def test_prefixed_name_variants() -> None:
    r = NameReconciler()
    assert r.variants_of("GNK-007") == ("007", "7", "GNK-7")


def test_numeric_name_variants() -> None:
    r = NameReconciler()
    assert r.variants_of("7") == ("GNK-7", "GNK-07", "007", "GNK-007")


def test_plain_name_gets_prefix() -> None:
    assert NameReconciler().variants_of("ABC") == ("GNK-ABC",)


def test_variants_never_contain_name_or_bare_prefix() -> None:
    r = NameReconciler()
    for name in ("GNK-000", "000", "0", "GNK-12", "12"):
        vs = r.variants_of(name)
        assert name not in vs
        assert "GNK-" not in vs
        assert "" not in vs
        assert len(set(vs)) == len(vs)


def test_candidates_start_with_name() -> None:
    r = NameReconciler()
    assert r.candidates(" 7 ")[0] == "7"
    assert r.candidates("") == ()


def test_from_config() -> None:
    r = NameReconciler.from_config(NameConfig(prefix="W-", pad_width=4))
    assert r.variants_of("12") == ("W-12", "W-012", "0012", "W-0012")
