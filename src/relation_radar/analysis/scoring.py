"""Keyword-frequency relation scoring."""

from collections import Counter
from collections.abc import Iterable

from relation_radar.data import Article, KeywordCount, RelationMetrics
from relation_radar.lexicon import DEFAULT_LEXICON, Lexicon
from relation_radar.text import count_whole_word, count_words, tr_lower

# Party mentions count double: party affiliation is a stronger signal than a
# generic reference to a state institution.
PARTY_WEIGHT = 2
SCORE_SCALE = 10


def compute_metrics(
    articles: Iterable[Article], lexicon: Lexicon = DEFAULT_LEXICON
) -> RelationMetrics:
    """Count institution and party keywords across ``articles``.

    Keywords are matched as whole words in the Turkish-lower-cased title, body
    and summary. The score is ``(institution + 2 * party) / words * 10``,
    capped at 1, where ``words`` excludes stopwords.
    """
    institution_count = 0
    party_count = 0
    total_words = 0
    tally: Counter[str] = Counter()

    for article in articles:
        text = tr_lower(article.text)

        for keyword in lexicon.institution_keywords:
            count = count_whole_word(text, keyword)
            if count:
                institution_count += count
                tally[keyword] += count

        for keyword in lexicon.party_keywords:
            count = count_whole_word(text, keyword)
            if count:
                party_count += count
                tally[keyword] += count

        total_words += count_words(text, lexicon.stopwords)

    score = 0.0
    if total_words > 0:
        weighted = institution_count + PARTY_WEIGHT * party_count
        score = min(1.0, weighted / total_words * SCORE_SCALE)

    return RelationMetrics(
        institution_mention_count=institution_count,
        party_mention_count=party_count,
        total_word_count=total_words,
        score=score,
        top_keywords=tuple(KeywordCount(keyword, count) for keyword, count in tally.most_common()),
    )


def relation_score(score: float) -> float:
    """Scale a 0-1 metric score to 0-10 with one decimal place."""
    return min(10.0, round(score * SCORE_SCALE, 1))
