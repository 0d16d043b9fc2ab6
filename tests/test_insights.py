"""Tests for key events, key people, connections and summary text."""

from relation_radar.analysis.insights import (
    build_summary_text,
    describe,
    extract_connections,
    extract_key_events,
    extract_key_people,
)
from relation_radar.data import (
    AffiliatedPerson,
    Article,
    ConnectionCategory,
    KeywordCount,
    RelationMetrics,
    RelationTier,
)
from relation_radar.lexicon import DEFAULT_LEXICON


class TestKeyEvents:
    def test_substring_match_and_newest_first(self) -> None:
        articles = [
            Article(url="a", published_date="2019-01-01", body="Bakanlığı'nın kararı"),
            Article(url="b", published_date="2021-01-01", body="AKP'li vekil"),
            Article(url="c", published_date="2022-01-01", body="Kâr açıklandı"),
        ]

        events = extract_key_events(articles)

        assert [e.url for e in events] == ["b", "a"]
        assert events[0].date == "2021-01-01"

    def test_body_takes_precedence_over_summary(self) -> None:
        article = Article(url="a", body="Kâr açıklandı", summary="Hükümet desteği")
        assert extract_key_events([article]) == []

    def test_summary_used_without_body(self) -> None:
        article = Article(url="a", summary="Hükümet desteği")
        assert len(extract_key_events([article])) == 1

    def test_collects_at_most_ten(self) -> None:
        articles = [Article(url=str(n), body="ihale") for n in range(12)]
        assert len(extract_key_events(articles)) == 10


class TestDescribe:
    def test_prefers_summary(self) -> None:
        assert describe(Article(url="u", summary="Özet", body="Gövde")) == "Özet"

    def test_first_body_paragraph_truncated(self) -> None:
        body = "x" * 250 + "\n\nİkinci"
        description = describe(Article(url="u", body=body))
        assert len(description) == 200
        assert description.endswith("...")

    def test_falls_back_to_title(self) -> None:
        assert describe(Article(url="u", title="Başlık")) == "Başlık"


class TestKeyPeople:
    def test_political_figures_get_tiers(self) -> None:
        text = " ".join(["Erdoğan'ın açıklaması"] * 6 + ["Hulusi Akar"] * 3)
        people = extract_key_people([Article(url="u", body=text)])

        by_name = {p.name: p for p in people}
        assert by_name["Erdoğan"].mention_count == 6
        assert by_name["Erdoğan"].relation_tier == RelationTier.HIGH
        assert by_name["Hulusi Akar"].relation_tier == RelationTier.MEDIUM
        assert "Bekir Bozdağ" not in by_name

    def test_affiliated_people_default_low(self) -> None:
        text = "Ali Veli " * 7
        people = extract_key_people(
            [Article(url="u", body=text)], [AffiliatedPerson("Ali Veli", "CEO")]
        )

        assert people[0].name == "Ali Veli"
        assert people[0].role == "CEO"
        assert people[0].relation_tier == RelationTier.LOW

    def test_affiliated_tier_from_count_when_not_overridden(self) -> None:
        people = extract_key_people(
            [Article(url="u", body="Ali Veli " * 7)],
            [AffiliatedPerson("Ali Veli")],
            affiliated_tier=None,
        )
        assert people[0].relation_tier == RelationTier.HIGH

    def test_unmentioned_affiliated_people_left_out(self) -> None:
        people = extract_key_people(
            [Article(url="u", body="Hiç kimse")], [AffiliatedPerson("Ali Veli")]
        )
        assert people == []

    def test_figures_already_affiliated_are_not_repeated(self) -> None:
        people = extract_key_people(
            [Article(url="u", body="Berat Albayrak açıkladı")],
            [AffiliatedPerson("Berat Albayrak", "Yönetim Kurulu Üyesi")],
        )

        assert [(p.name, p.role) for p in people] == [("Berat Albayrak", "Yönetim Kurulu Üyesi")]

    def test_sorted_by_mention_count(self) -> None:
        text = "Mehmet Şimşek " + "Fahrettin Koca " * 3
        people = extract_key_people([Article(url="u", body=text)])
        assert [p.name for p in people] == ["Fahrettin Koca", "Mehmet Şimşek"]


class TestConnections:
    def test_counts_articles_and_dedups_supporting(self) -> None:
        a = Article(url="a", title="A", published_date="2020-01-01", body="TOKİ ihalesi")
        b = Article(url="b", title="B", body="toki ve TMSF")

        connections = extract_connections(
            [a, b, a], DEFAULT_LEXICON.institution_entities, ConnectionCategory.INSTITUTION
        )

        toki = connections[0]
        assert toki.entity_name == "TOKİ"
        assert toki.mention_count == 3
        assert [s.url for s in toki.supporting_articles] == ["a", "b"]
        assert toki.supporting_articles[0].date == "2020-01-01"
        assert toki.category == ConnectionCategory.INSTITUTION
        assert connections[1].entity_name == "TMSF"

    def test_party_entities(self) -> None:
        article = Article(url="a", body="Recep Tayyip Erdoğan ve AK Parti")

        connections = extract_connections(
            [article], DEFAULT_LEXICON.party_entities, ConnectionCategory.PARTY
        )

        names = {c.entity_name for c in connections}
        assert {"Erdoğan", "Recep Tayyip Erdoğan", "AK Parti"} <= names

    def test_no_matches(self) -> None:
        article = Article(url="a", body="Kâr açıklandı")
        assert extract_connections([article], ("TOKİ",), ConnectionCategory.INSTITUTION) == []


class TestSummaryText:
    def _articles(self) -> list[Article]:
        return [
            Article(url="a", published_date="2020-03-01"),
            Article(url="b", published_date="2018-05-10"),
            Article(url="c"),
        ]

    def test_high_tier(self) -> None:
        metrics = RelationMetrics(score=0.75)
        assert "high level" in build_summary_text("Acme", self._articles(), metrics)

    def test_medium_tier(self) -> None:
        metrics = RelationMetrics(score=0.4)
        assert "medium level" in build_summary_text("Acme", self._articles(), metrics)

    def test_low_tier(self) -> None:
        metrics = RelationMetrics(score=0.39)
        assert "low level" in build_summary_text("Acme", self._articles(), metrics)

    def test_counts_keywords_and_period(self) -> None:
        metrics = RelationMetrics(
            institution_mention_count=4,
            party_mention_count=2,
            score=0.1,
            top_keywords=(
                KeywordCount("ihale", 3),
                KeywordCount("akp", 2),
                KeywordCount("kamu", 1),
                KeywordCount("fon", 1),
            ),
        )

        text = build_summary_text("Acme", self._articles(), metrics)

        assert "Across 3 articles, 4 government-related and 2 party-related" in text
        assert "Most frequent keywords: ihale (3), akp (2), kamu (1)." in text
        assert "from 2018-05-10 to 2020-03-01" in text

    def test_no_articles(self) -> None:
        text = build_summary_text("Acme", [], RelationMetrics())
        assert text == "No news articles were found to analyze for Acme."
