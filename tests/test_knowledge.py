"""Tests for the DomainKnowledge query facade."""

from domain_knowledge import (
    CategoryRankingPolicy,
    DomainKnowledge,
    MemoryObservationStore,
    Outcome,
    SelectorRankingPolicy,
)


def record_many(knowledge, domain, field, selector, successes, failures=0):
    for _ in range(successes):
        knowledge.record_selector_outcome(domain, field, selector, Outcome.SUCCESS)
    for _ in range(failures):
        knowledge.record_selector_outcome(domain, field, selector, Outcome.FAILURE)


def record_categories(knowledge, domain, category, successes, failures=0):
    for _ in range(successes):
        knowledge.record_category_outcome(domain, category, Outcome.SUCCESS)
    for _ in range(failures):
        knowledge.record_category_outcome(domain, category, Outcome.FAILURE)


class TestBestSelectors:

    def test_discovered_selector_wins_end_to_end(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1.title", 10)
        knowledge.record_discovered_selector("shop.pl", "name", "h1.product-name", 90)
        record_many(knowledge, "shop.pl", "name", "h1.product-name", 4, 1)

        assert knowledge.best_selectors("shop.pl")["name"] == "h1.product-name"

    def test_best_per_field_and_missing_fields_absent(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1.bad", 2, 8)
        record_many(knowledge, "shop.pl", "name", "h1.good", 10, 1)
        record_many(knowledge, "shop.pl", "price", ".price", 15, 2)
        record_many(knowledge, "shop.pl", "thumbnail_url", "img.main", 1)

        results = knowledge.best_selectors("shop.pl")

        assert results == {"name": "h1.good", "price": ".price"}
        assert "thumbnail_url" not in results

    def test_no_reliable_selectors(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1", 1)
        assert knowledge.best_selectors("shop.pl") == {}
        assert knowledge.best_selectors("unknown.pl") == {}

    def test_query_domain_is_normalized(self, knowledge):
        record_many(knowledge, "www.shop.pl", "price", ".price", 15)
        assert knowledge.best_selectors("WWW.SHOP.PL ") == {"price": ".price"}

    def test_repeated_queries_identical(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1.good", 10, 1)
        record_many(knowledge, "shop.pl", "price", ".price", 3, 3)

        assert knowledge.best_selectors("shop.pl") == knowledge.best_selectors("shop.pl")
        assert knowledge.selector_report("shop.pl") == knowledge.selector_report("shop.pl")

    def test_categories_do_not_leak_into_selectors(self, knowledge):
        record_categories(knowledge, "shop.pl", "meble", 20)
        assert knowledge.best_selectors("shop.pl") == {}
        assert knowledge.selector_report("shop.pl")["stats"]["total_selectors"] == 0

    def test_custom_policy(self):
        knowledge = DomainKnowledge(
            store=MemoryObservationStore(),
            selector_policy=SelectorRankingPolicy(min_samples=20),
        )
        record_many(knowledge, "shop.pl", "name", "h1", 10)
        assert knowledge.best_selectors("shop.pl") == {}


class TestSelectorRecording:

    def test_untracked_field_ignored(self, knowledge):
        assert knowledge.record_selector_outcome("shop.pl", "color", ".c", Outcome.SUCCESS) is None
        assert knowledge.record_discovered_selector("shop.pl", "color", ".c", 50) is None
        assert knowledge.all_for_domain("shop.pl") == []

    def test_recorded_selector_returned(self, knowledge):
        record = knowledge.record_selector_outcome("shop.pl", "price", ".price", Outcome.FAILURE)
        assert record.failure_count == 1


class TestSelectorReport:

    def test_report_stats(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1.good", 10, 1)
        knowledge.record_discovered_selector("shop.pl", "name", "h1.found", 80)
        record_many(knowledge, "shop.pl", "price", ".price", 15, 2)

        report = knowledge.selector_report("www.shop.pl")
        stats = report["stats"]

        assert report["domain"] == "shop.pl"
        assert report["selectors"] == {"name": "h1.good", "price": ".price"}
        assert stats["total_selectors"] == 3
        assert stats["discovered_count"] == 1
        assert stats["heuristic_count"] == 2

        fields = {f["field"]: f for f in stats["fields"]}
        assert fields["name"]["selector_count"] == 2
        assert fields["name"]["best_selector"] == "h1.good"
        assert fields["name"]["best_discovery_method"] == "heuristic"
        assert fields["price"]["best_confidence"] > 0.5
        assert fields["thumbnail_url"]["selector_count"] == 0
        assert fields["thumbnail_url"]["best_selector"] is None

    def test_all_for_domain(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1", 2, 1)
        rows = knowledge.all_for_domain("shop.pl")

        assert len(rows) == 1
        assert rows[0]["field"] == "name"
        assert rows[0]["success"] == 2
        assert rows[0]["failure"] == 1
        assert rows[0]["last_seen"] is not None


class TestCategories:

    def test_losing_category_gated(self, knowledge):
        record_categories(knowledge, "shop.pl", "meble", 3, 7)
        assert knowledge.top_category("shop.pl") is None
        assert knowledge.all_categories("shop.pl") == []

    def test_winning_category_returned(self, knowledge):
        record_categories(knowledge, "shop.pl", "meble", 20, 1)
        top = knowledge.top_category("shop.pl")

        assert top["category"] == "meble"
        assert top["confidence"] > 0.7
        assert top["samples"] == 21

    def test_all_categories_ranked(self, knowledge):
        record_categories(knowledge, "shop.pl", "dekoracje", 6, 2)
        record_categories(knowledge, "shop.pl", "meble", 20, 1)
        record_categories(knowledge, "shop.pl", "agd", 1)

        ranked = knowledge.all_categories("shop.pl")
        assert [c["category"] for c in ranked] == ["meble", "dekoracje"]
        assert ranked[0]["confidence"] >= ranked[1]["confidence"]

    def test_invalid_category_ignored(self, knowledge):
        assert knowledge.record_category_outcome("shop.pl", "furniture", Outcome.SUCCESS) is None
        assert knowledge.category_report("shop.pl")["stats"]["total_records"] == 0

    def test_category_report(self, knowledge):
        record_categories(knowledge, "www.shop.pl", "meble", 20, 1)
        record_categories(knowledge, "shop.pl", "agd", 0, 3)

        report = knowledge.category_report("shop.pl")
        assert report["domain"] == "shop.pl"
        assert report["top_category"]["category"] == "meble"
        assert [c["category"] for c in report["categories"]] == ["meble"]
        assert report["stats"] == {"total_records": 2, "total_samples": 24}

    def test_custom_category_policy(self):
        knowledge = DomainKnowledge(
            store=MemoryObservationStore(),
            category_policy=CategoryRankingPolicy(min_confidence=0.8),
        )
        record_categories(knowledge, "shop.pl", "meble", 20, 1)
        assert knowledge.top_category("shop.pl") is None


class TestDomainOverview:

    def test_overview(self, knowledge):
        record_many(knowledge, "shop.pl", "name", "h1", 10)
        knowledge.record_discovered_selector("shop.pl", "price", ".price", 70)
        record_many(knowledge, "ikea.pl", "thumbnail_url", "img.main", 3)
        record_categories(knowledge, "meble-only.pl", "meble", 5)

        overview = {d["domain"]: d for d in knowledge.domain_overview()}

        assert set(overview) == {"shop.pl", "ikea.pl"}
        shop = overview["shop.pl"]
        assert shop["selector_count"] == 2
        assert shop["discovered_count"] == 1
        assert shop["name_confidence"] > 0.7
        assert shop["thumbnail_url_confidence"] is None
        assert shop["last_activity"] is not None
