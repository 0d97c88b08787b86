import pytest

from enquiry_app.importer.contracts import ENQUIRY_CANONICAL_COLUMNS, get_enquiry_alias_map
from enquiry_app.importer.pipeline import (
    ColumnResolver,
    ExactHeaderTier,
    MatchTier,
    normalize_header,
)


def _variants(alias):
    yield alias
    yield alias.upper()
    yield alias.lower()
    yield f"  {alias} "
    yield alias.replace(" ", "")
    yield alias.replace(".", "")
    yield alias.replace(" ", "_")


ALIAS_CASES = [
    (spec.name, alias, variant)
    for spec in ENQUIRY_CANONICAL_COLUMNS
    for alias in spec.aliases
    for variant in _variants(alias)
]


@pytest.fixture
def resolver():
    return ColumnResolver(get_enquiry_alias_map())


@pytest.mark.parametrize("field, alias, header", ALIAS_CASES)
def test_every_alias_variant_resolves(resolver, field, alias, header):
    assert resolver.resolve({header: "value"}, field) == "value"
    assert resolver.consumes(header)


@pytest.mark.parametrize("sentinel", ["", "-", "  -  ", None])
def test_sentinels_are_absent(resolver, sentinel):
    assert resolver.resolve({"Enq No.": sentinel}, "enquiry_number") is None


def test_sentinel_falls_through_to_later_alias(resolver):
    row = {"Enq No.": "-", "Enquiry Number": "E-7"}
    assert resolver.resolve(row, "enquiry_number") == "E-7"


def test_earlier_alias_wins_within_a_tier(resolver):
    row = {"Enquiry Number": "B", "Enq No.": "A"}
    assert resolver.resolve(row, "enquiry_number") == "A"


def test_exact_tier_beats_looser_match_of_an_earlier_alias(resolver):
    row = {"enq no.": "loose", "Enquiry Number": "exact"}
    assert resolver.resolve(row, "enquiry_number") == "exact"


def test_non_string_headers_are_ignored(resolver):
    assert resolver.resolve({1: "x", "Customer": "Acme"}, "customer_name") == "Acme"


def test_unmapped_headers_are_not_consumed(resolver):
    assert not resolver.consumes("Priority Level")
    assert not resolver.consumes("Region")
    assert resolver.resolve({"Region": "North"}, "customer_name") is None


def test_unknown_field_raises(resolver):
    with pytest.raises(KeyError):
        resolver.resolve({"Enq No.": "1"}, "colour")


def test_extra_aliases_are_tried_first(resolver):
    extended = resolver.with_extra_aliases("enquiry_number", "Ref")
    assert extended.aliases_for("enquiry_number")[0] == "Ref"
    assert extended.resolve({"Ref": "R-1", "Enq No.": "E-1"}, "enquiry_number") == "R-1"
    assert extended.consumes("ref")
    assert not resolver.consumes("Ref")


def test_custom_tier_chain():
    class PrefixTier(MatchTier):
        name = "prefix"

        def matches(self, header, alias):
            return header.startswith(alias)

    resolver = ColumnResolver({"code": ("Code",)}, tiers=(ExactHeaderTier(), PrefixTier()))
    assert resolver.resolve({"Code (internal)": "X1"}, "code") == "X1"
    assert resolver.resolve({"code": "X2"}, "code") is None


def test_normalize_header():
    assert normalize_header(" Enq. No_/- ") == "enqno"
    assert normalize_header("EXPORT / DOMESTIC") == "exportdomestic"
