"""Unit tests for the filter/search predicate builder.

Predicates are evaluated against a real (SQLite) session so the tests check
which rows match rather than the shape of the SQL.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite

from sku_service.domain.sku import SkuSearchCriteria, build_filter_predicate, build_search_predicate
from sku_service.models.sku import Sku


@pytest.fixture
def catalog(db_session):
    rows = [
        Sku(sku_code="THD-LBR-0000001", name="2x4x8 Pressure Treated Lumber", category="LBR",
            subcategory="PRESSURE_TREATED", brand="WeatherShield", price=Decimal("8.99"),
            status="ACTIVE", tags=["outdoor", "treated"], description="Ground contact pine"),
        Sku(sku_code="THD-LBR-0000002", name="Cedar Fence Picket", category="LBR",
            subcategory="FENCING", brand="Outdoor Essentials", price=Decimal("3.48"),
            status="DISCONTINUED", tags=["outdoor", "fence"]),
        Sku(sku_code="THD-PLB-0000001", name="PEX Pipe 1/2 in. x 100 ft.", category="PLB",
            brand="SharkBite", price=Decimal("45.00"), status="ACTIVE",
            tags=["pex"], description="Flexible tubing for outdoor_rated lines"),
        Sku(sku_code="THD-TOL-0000001", name="Cordless Drill", category="TOL",
            brand="Ryobi", price=Decimal("99.00"), status="ACTIVE", tags=None),
        Sku(sku_code="THD-KIT-0000001", name="Espresso Cup Set", category="KIT",
            brand="Maison", price=Decimal("24.00"), status="ACTIVE", tags=["café", "ceramic"]),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


def matching_codes(db_session, predicate) -> set[str]:
    return set(db_session.execute(select(Sku.sku_code).where(predicate)).scalars())


class TestFilterPredicate:

    def test_no_filters_match_everything(self, db_session, catalog):
        assert len(matching_codes(db_session, build_filter_predicate())) == 5

    def test_category(self, db_session, catalog):
        codes = matching_codes(db_session, build_filter_predicate(category="LBR"))
        assert codes == {"THD-LBR-0000001", "THD-LBR-0000002"}

    def test_price_range_inclusive(self, db_session, catalog):
        predicate = build_filter_predicate(min_price=Decimal("5"), max_price=Decimal("50"))
        assert matching_codes(db_session, predicate) == {"THD-LBR-0000001", "THD-PLB-0000001", "THD-KIT-0000001"}

    def test_filters_are_anded(self, db_session, catalog):
        predicate = build_filter_predicate(category="LBR", status="ACTIVE")
        assert matching_codes(db_session, predicate) == {"THD-LBR-0000001"}

    def test_blank_strings_impose_no_constraint(self, db_session, catalog):
        predicate = build_filter_predicate(category="", brand="   ")
        assert len(matching_codes(db_session, predicate)) == 5


class TestSearchPredicate:

    def test_empty_criteria_match_everything(self, db_session, catalog):
        assert len(matching_codes(db_session, build_search_predicate(SkuSearchCriteria()))) == 5

    def test_query_matches_name_case_insensitively(self, db_session, catalog):
        criteria = SkuSearchCriteria(query="cedar")
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-LBR-0000002"}

    def test_query_matches_description(self, db_session, catalog):
        criteria = SkuSearchCriteria(query="GROUND CONTACT")
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-LBR-0000001"}

    def test_query_wildcards_are_literal(self, db_session, catalog):
        """An underscore in the query matches only a literal underscore"""
        criteria = SkuSearchCriteria(query="outdoor_rated")
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-PLB-0000001"}

        criteria = SkuSearchCriteria(query="100%")
        assert matching_codes(db_session, build_search_predicate(criteria)) == set()

    def test_tags_match_any(self, db_session, catalog):
        criteria = SkuSearchCriteria(tags=["fence", "pex"])
        codes = matching_codes(db_session, build_search_predicate(criteria))
        assert codes == {"THD-LBR-0000002", "THD-PLB-0000001"}

    def test_tag_must_match_whole_tag(self, db_session, catalog):
        criteria = SkuSearchCriteria(tags=["out"])
        assert matching_codes(db_session, build_search_predicate(criteria)) == set()

    def test_combined_criteria(self, db_session, catalog):
        criteria = SkuSearchCriteria(
            category="LBR",
            status="ACTIVE",
            tags=["outdoor"],
            max_price=Decimal("10.00"),
        )
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-LBR-0000001"}

    def test_subcategory_and_brand(self, db_session, catalog):
        criteria = SkuSearchCriteria(subcategory="FENCING", brand="Outdoor Essentials")
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-LBR-0000002"}

    def test_same_criteria_build_equivalent_predicates(self, db_session, catalog):
        criteria = SkuSearchCriteria(query="pipe", min_price=Decimal("1"))
        first = matching_codes(db_session, build_search_predicate(criteria))
        second = matching_codes(db_session, build_search_predicate(criteria))
        assert first == second == {"THD-PLB-0000001"}

    def test_non_ascii_tag(self, db_session, catalog):
        criteria = SkuSearchCriteria(tags=["café"])
        assert matching_codes(db_session, build_search_predicate(criteria)) == {"THD-KIT-0000001"}


class TestTagMatchCompilation:
    """Tag matching renders per backend"""

    def test_postgresql_uses_jsonb_has_any(self):
        predicate = build_search_predicate(SkuSearchCriteria(tags=["café", "pex"]))

        compiled = predicate.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})

        assert "?|" in str(compiled)
        assert "café" in str(compiled)
        assert "LIKE" not in str(compiled)

    def test_sqlite_matches_json_text(self):
        predicate = build_search_predicate(SkuSearchCriteria(tags=["pex"]))

        compiled = str(predicate.compile(dialect=sqlite.dialect()))

        assert "LIKE" in compiled
        assert "CAST" in compiled
