"""Unit tests for product search relevance and tag cleanup"""

from src.domain.product import normalize_tags, relevance_score
from tests.fixtures.factories import make_product


class TestRelevanceScore:
    def test_name_tag_and_category_scores_add_up(self):
        product = make_product(name="Bouquet de roses", category="Roses", tags=["roses rouges"])

        assert relevance_score(product, "ros") == 18

    def test_name_only_match(self):
        product = make_product(name="Bouquet de roses", category="Bouquets", tags=["amour"])

        assert relevance_score(product, "ros") == 10

    def test_tag_only_match(self):
        product = make_product(name="Composition printanière", category="Compositions", tags=["rose"])

        assert relevance_score(product, "ros") == 5

    def test_match_is_case_insensitive(self):
        product = make_product(name="ROSES ÉTERNELLES", category="Bouquets")

        assert relevance_score(product, "  Ros ") == 10

    def test_no_match_scores_zero(self):
        product = make_product(name="Orchidée", category="Plantes", tags=["blanc"])

        assert relevance_score(product, "ros") == 0


class TestNormalizeTags:
    def test_trimmed_lowercased_and_deduplicated(self):
        assert normalize_tags([" Mariée", "ROSES", "", "mariée ", "roses"]) == ["mariée", "roses"]

    def test_accented_tag_scores(self):
        product = make_product(name="Bouquet blanc", category="Bouquets", tags=normalize_tags(["Mariée"]))

        assert relevance_score(product, "MARIÉE") == 5
