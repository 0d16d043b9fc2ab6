"""Key events, key people, entity connections and the summary paragraph.

Events and connections use plain substring matching while scoring and people
counts use whole-word matching. The looser match is kept on purpose so that
inflected forms ("Bakanlığı'nın") still surface as connections.
"""

from collections.abc import Sequence

from relation_radar.data import (
    AffiliatedPerson,
    Article,
    ConnectionCategory,
    ConnectionRecord,
    KeyEvent,
    PersonMention,
    RelationMetrics,
    RelationTier,
    SupportingArticle,
    newest_first,
)
from relation_radar.lexicon import DEFAULT_LEXICON, Lexicon
from relation_radar.text import contains_any, count_whole_word, paragraphs, tr_lower, truncate

MAX_EVENT_CANDIDATES = 10
DESCRIPTION_LENGTH = 200
POLITICAL_ROLE = "Politician/Bureaucrat"

HIGH_SCORE = 0.7
MEDIUM_SCORE = 0.4


def describe(article: Article) -> str:
    """Short description: the summary, else the first body paragraph, else the title."""
    if article.summary:
        return article.summary
    parts = paragraphs(article.body)
    if not parts:
        return article.title
    return truncate(parts[0], DESCRIPTION_LENGTH)


def extract_key_events(
    articles: Sequence[Article], lexicon: Lexicon = DEFAULT_LEXICON
) -> list[KeyEvent]:
    """Newest articles that mention any institution or party keyword.

    At most ten candidates are collected; callers keep the top five.
    """
    events: list[KeyEvent] = []
    for article in newest_first(list(articles)):
        if len(events) >= MAX_EVENT_CANDIDATES:
            break
        content = article.body or article.summary
        if not contains_any(content, lexicon.relation_keywords):
            continue
        events.append(
            KeyEvent(
                date=article.published_date,
                title=article.title,
                description=describe(article),
                source=article.source,
                url=article.url,
            )
        )
    return events


def extract_key_people(
    articles: Sequence[Article],
    affiliated: Sequence[AffiliatedPerson] = (),
    lexicon: Lexicon = DEFAULT_LEXICON,
    *,
    affiliated_tier: RelationTier | None = RelationTier.LOW,
) -> list[PersonMention]:
    """Count whole-word mentions of affiliated people and known political figures.

    People with no mentions are left out. Political figures already on the
    affiliated roster are not listed twice. Political figures get a tier from
    their mention count; affiliated people get ``affiliated_tier``, or a
    count-based tier when it is None.
    """
    text = " ".join(tr_lower(article.text) for article in articles)
    mentions: dict[str, PersonMention] = {}

    for person in affiliated:
        key = tr_lower(person.name.strip())
        count = count_whole_word(text, person.name.strip())
        if count > 0 and key not in mentions:
            tier = affiliated_tier or RelationTier.from_count(count)
            mentions[key] = PersonMention(person.name, person.role, count, tier)

    for name in lexicon.political_figures:
        key = tr_lower(name)
        if key in mentions:
            continue
        count = count_whole_word(text, name)
        if count > 0:
            mentions[key] = PersonMention(
                name, POLITICAL_ROLE, count, RelationTier.from_count(count)
            )

    return sorted(mentions.values(), key=lambda m: m.mention_count, reverse=True)


def extract_connections(
    articles: Sequence[Article],
    entities: Sequence[str],
    category: ConnectionCategory,
) -> list[ConnectionRecord]:
    """Entities mentioned in the articles, most mentioned first.

    Each article that contains an entity name (case-insensitive substring)
    adds one to its count and is listed once among its supporting articles.
    """
    counts: dict[str, int] = {}
    supporting: dict[str, list[SupportingArticle]] = {}

    for article in articles:
        text = tr_lower(article.text)
        for entity in entities:
            if tr_lower(entity) not in text:
                continue
            counts[entity] = counts.get(entity, 0) + 1
            refs = supporting.setdefault(entity, [])
            if all(ref.url != article.url for ref in refs):
                refs.append(SupportingArticle(article.title, article.published_date, article.url))

    records = [
        ConnectionRecord(entity, count, category, tuple(supporting[entity]))
        for entity, count in counts.items()
    ]
    return sorted(records, key=lambda r: r.mention_count, reverse=True)


def no_data_summary(subject: str) -> str:
    return f"No news articles were found to analyze for {subject}."


def build_summary_text(
    subject: str, articles: Sequence[Article], metrics: RelationMetrics
) -> str:
    """Assemble the templated analysis paragraph."""
    if not articles:
        return no_data_summary(subject)

    if metrics.score >= HIGH_SCORE:
        level, verb = "high", "appears to have"
    elif metrics.score >= MEDIUM_SCORE:
        level, verb = "medium", "shows"
    else:
        level, verb = "low", "appears to have"
    opening = (
        f"{subject} {verb} a {level} level of relation with the government and the ruling party."
    )

    sentences = [
        opening,
        f"Across {len(articles)} articles, {metrics.institution_mention_count} government-related "
        f"and {metrics.party_mention_count} party-related keyword mentions were found.",
    ]

    if metrics.top_keywords:
        top = ", ".join(f"{k.keyword} ({k.count})" for k in metrics.top_keywords[:3])
        sentences.append(f"Most frequent keywords: {top}.")

    dates = sorted(a.published_date for a in articles if a.published_date)
    if dates:
        sentences.append(f"The articles cover the period from {dates[0]} to {dates[-1]}.")

    return " ".join(sentences)
