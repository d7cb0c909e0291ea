import pytest

from docsummarizer.keywords import KeywordExtractor, deduplicate_variants, root_key
from docsummarizer.tagger import DictTagger, PosTag
from docsummarizer.types import ScoredCandidate

ARTICLE = (
    "Swift developers at Apple shipped a new compiler release. The compiler release "
    "improves build performance for large projects. Developers reported faster builds, "
    "and the Swift community welcomed the release. Development of the compiler continues "
    "in Cupertino, where Apple engineers are developing new optimization passes."
)


class TestRelevanceScore:
    def test_neutral_path_without_tagger(self):
        extractor = KeywordExtractor()
        assert extractor.relevance_score("Swift", 2) == pytest.approx(2 * 0.8 * 1.5)
        assert extractor.relevance_score("compiler", 3) == pytest.approx(3 * 0.8)

    def test_abstract_suffix_penalty(self):
        extractor = KeywordExtractor()
        assert extractor.relevance_score("development", 3) == pytest.approx(3 * 0.8 * 0.6)
        assert extractor.relevance_score("Station", 1) == pytest.approx(0.8 * 0.6 * 1.5)

    def test_stopwords_and_short_words_score_zero(self):
        extractor = KeywordExtractor()
        assert extractor.relevance_score("The", 10) == 0.0
        assert extractor.relevance_score("ai", 10) == 0.0

    def test_tagger_multipliers(self):
        tagger = DictTagger(
            {
                "Paris": PosTag.PLACE_NAME,
                "Acme": "organization_name",
                "engine": PosTag.NOUN,
                "running": PosTag.VERB,
                "quick": PosTag.ADJECTIVE,
            }
        )
        extractor = KeywordExtractor(tagger=tagger)
        assert extractor.relevance_score("Paris", 1) == pytest.approx(3.0 * 1.5)
        assert extractor.relevance_score("Acme", 2) == pytest.approx(2 * 3.0 * 1.5)
        assert extractor.relevance_score("engine", 1) == pytest.approx(1.5)
        assert extractor.relevance_score("running", 1) == pytest.approx(0.5 * 0.6)
        assert extractor.relevance_score("quick", 1) == pytest.approx(0.5)
        assert extractor.relevance_score("unknown", 1) == pytest.approx(0.8)


class TestRootKey:
    def test_long_words_use_prefix(self):
        assert root_key("Developer") == "devel"
        assert root_key("development") == "devel"

    def test_short_words_use_whole_word(self):
        assert root_key("Swift") == "swift"
        assert root_key("cats") == "cats"


class TestDeduplicateVariants:
    def test_keeps_best_scoring_variant(self):
        candidates = [
            ScoredCandidate("Developer", 2.4, 0),
            ScoredCandidate("Development", 0.72, 1),
            ScoredCandidate("developing", 0.48, 2),
            ScoredCandidate("compiler", 1.0, 3),
        ]
        assert [c.text for c in deduplicate_variants(candidates)] == ["Developer", "compiler"]

    def test_ties_keep_first_seen(self):
        candidates = [ScoredCandidate("Planning", 1.0, 0), ScoredCandidate("Planner", 1.0, 1)]
        assert [c.text for c in deduplicate_variants(candidates)] == ["Planning"]


class TestExtractKeyPoints:
    def test_variants_collapse_to_best(self):
        text = "Developer Developer Development developing"
        assert KeywordExtractor().extract_key_points(text, 5) == ["Developer"]

    def test_respects_count_and_order(self):
        extractor = KeywordExtractor()
        scored = extractor.score_keywords(ARTICLE)
        keywords = extractor.extract_key_points(ARTICLE, 4)
        assert len(keywords) <= 4
        assert keywords == [candidate.text for candidate in scored[:4]]
        scores = [candidate.score for candidate in scored]
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)

    def test_root_keys_are_unique(self):
        keywords = KeywordExtractor().extract_key_points(ARTICLE, 50)
        keys = [root_key(word) for word in keywords]
        assert len(keys) == len(set(keys))

    def test_capitalized_frequent_words_rank_first(self):
        keywords = KeywordExtractor().extract_key_points(ARTICLE, 3)
        assert keywords[0] in {"Swift", "Apple", "Developers"}

    def test_equal_scores_keep_first_seen_order(self):
        assert KeywordExtractor().extract_key_points("alpha beta gamma", 3) == ["alpha", "beta", "gamma"]

    def test_fewer_candidates_than_requested(self):
        assert KeywordExtractor().extract_key_points("the and of pipeline", 5) == ["pipeline"]

    def test_entity_tags_boost_ranking(self):
        tagger = DictTagger({"cupertino": PosTag.PLACE_NAME})
        keywords = KeywordExtractor(tagger=tagger).extract_key_points(ARTICLE, 10)
        assert "Cupertino" in keywords

    def test_empty_and_zero_count(self):
        extractor = KeywordExtractor()
        assert extractor.extract_key_points("", 5) == []
        assert extractor.extract_key_points("   ", 5) == []
        assert extractor.extract_key_points(ARTICLE, 0) == []
