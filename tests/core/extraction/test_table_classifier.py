"""Tests for signature-based table classification."""

from __future__ import annotations

from goldrates.core.extraction.classifier import TableClassifier
from goldrates.core.models.tables import RawTable
from goldrates.core.models.vendors import CategorySignature, VendorProfile
from goldrates.core.vendors.builtin import CUSTOMER_SELL, GOLD_RATES, MSGOLD, OUR_RATES, TTTBULLION


def _table(*rows: list[str], caption: str | None = None) -> RawTable:
    return RawTable.from_rows(rows, caption=caption)


def test_first_matching_table_wins() -> None:
    classifier = TableClassifier()
    first = _table(["Gold", "We Buy", "We Sell"], ["Gold 1g", "250", "255"])
    second = _table(["Gold", "We Buy", "We Sell"], ["Gold 5g", "1250", "1275"])

    result = classifier.classify([first, second], TTTBULLION)

    assert result == {GOLD_RATES: first}


def test_second_table_classified_when_first_is_excluded() -> None:
    classifier = TableClassifier()
    silver = _table(["Gold and Silver"], ["Silver 1kg", "3100", "3300"])
    gold = _table(["Gold"], ["Gold 1g", "250", "255"])

    matches = classifier.match([silver, gold], TTTBULLION)

    assert matches[GOLD_RATES] is not None
    assert matches[GOLD_RATES].table is gold
    assert matches[GOLD_RATES].index == 1
    assert not matches[GOLD_RATES].via_fallback


def test_each_category_gets_its_own_table(msgold_tables: list[RawTable]) -> None:
    result = TableClassifier().classify(msgold_tables, MSGOLD)

    assert result[OUR_RATES] is msgold_tables[1]
    assert result[CUSTOMER_SELL] is msgold_tables[2]


def test_missing_category_is_none() -> None:
    ours = _table(["DETAILS", "WE BUY", "WE SELL"], ["USD / MYR", "4.70", "4.75"])

    result = TableClassifier().classify([ours], MSGOLD)

    assert result[OUR_RATES] is ours
    assert result[CUSTOMER_SELL] is None


def test_empty_table_set_classifies_nothing() -> None:
    result = TableClassifier().classify([], MSGOLD)

    assert result == {OUR_RATES: None, CUSTOMER_SELL: None}


def test_caption_counts_as_table_text() -> None:
    table = _table(["1g", "250", "255"], caption="Gold")

    assert TableClassifier().classify([table], TTTBULLION)[GOLD_RATES] is table


def test_overlapping_signatures_share_the_first_table() -> None:
    profile = VendorProfile(
        vendor_id="shared",
        display_name="Shared",
        url="",
        categories=(
            CategorySignature(tag="All", required=("Gold",)),
            CategorySignature(tag="Bars", required=("Gold", "Bar")),
        ),
    )
    first = _table(["Gold Bar 1kg"])
    second = _table(["Gold Bar 5kg"])

    matches = TableClassifier().match([first, second], profile)

    assert matches["All"] is not None and matches["All"].index == 0
    assert matches["Bars"] is not None and matches["Bars"].index == 0
    assert matches["Bars"].table is first


def test_primary_category_found_by_signature_is_not_a_fallback() -> None:
    profile = VendorProfile(
        vendor_id="fallback",
        display_name="Fallback",
        url="",
        categories=(
            CategorySignature(tag="Headline", required=("Gold",)),
            CategorySignature(tag="Rates", required=("Gold",), excluded=("Silver",)),
        ),
        primary_category="Rates",
    )
    only = _table(["Gold"], ["Gold 1g", "250", "255"])

    matches = TableClassifier().match([only], profile)

    assert matches["Headline"] is not None
    assert matches["Headline"].table is only
    assert matches["Rates"] is not None
    assert matches["Rates"].table is only
    assert not matches["Rates"].via_fallback


def test_primary_fallback_revalidates_first_table() -> None:
    silver = _table(["Silver"], ["Silver 1kg", "3100", "3300"])

    result = TableClassifier().classify([silver], TTTBULLION)

    assert result[GOLD_RATES] is None
