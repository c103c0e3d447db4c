import pytest

from adbroll.services.matching_impl.config import MatchingConfig
from adbroll.services.matching_impl.scorer import ProductText, SimilarityScorer, VideoText, levenshtein_similarity


@pytest.fixture
def scorer() -> SimilarityScorer:
    return SimilarityScorer(MatchingConfig())


class TestLevenshteinSimilarity:
    def test_identical_strings(self):
        assert levenshtein_similarity("plancha", "plancha") == 1.0

    def test_two_empty_strings(self):
        assert levenshtein_similarity("", "") == 1.0

    def test_partial_similarity(self):
        # distance 3 over the longer length 7
        assert levenshtein_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    def test_completely_different(self):
        assert levenshtein_similarity("abc", "xyz") == 0.0


class TestSimilarityScorer:
    def test_explicit_name_exact_match_scores_one(self, scorer):
        video = VideoText(product_name="plancha de cabello profesional x200")
        product = ProductText(name="Plancha de Cabello Profesional X200")

        assert scorer.score(video, product) == 1.0

    def test_token_overlap_clears_default_threshold(self, scorer):
        video = VideoText(title="Estos audífonos bluetooth cambiaron mi vida 🎧✨")
        product = ProductText(name="Audífonos Bluetooth Pro")

        score = scorer.score(video, product)

        assert score == pytest.approx(0.75)
        assert score >= 0.55

    def test_unrelated_title_stays_below_threshold(self, scorer):
        video = VideoText(title="Rutina de skincare nocturna")
        product = ProductText(name="Crema Facial Hidratante")

        assert scorer.score(video, product) < 0.55

    def test_product_name_contained_in_title(self, scorer):
        video = VideoText(title="Les presento la nueva plancha de cabello profesional x200!!")
        product = ProductText(name="Plancha de Cabello Profesional X200")

        assert scorer.score(video, product) == pytest.approx(0.85)

    def test_explicit_name_containment(self, scorer):
        video = VideoText(product_name="Plancha de cabello")
        product = ProductText(name="Plancha de Cabello Profesional X200")

        assert scorer.score(video, product) == pytest.approx(0.9)

    def test_explicit_name_beats_weak_title(self, scorer):
        video = VideoText(title="mira esto", product_name="Crema Facial Hidratante")
        product = ProductText(name="Crema facial hidratante")

        assert scorer.score(video, product) == 1.0

    def test_near_token_matches_count_as_overlap(self, scorer):
        # "audifono" is one edit away from "audifonos"
        video = VideoText(title="mi audifono bluetooth favorito")
        product = ProductText(name="Audífonos Bluetooth")

        assert scorer.score(video, product) == pytest.approx(0.75)

    def test_category_bonus_applies_on_equal_categories(self, scorer):
        video = VideoText(title="Estos audífonos bluetooth cambiaron mi vida", category="Electrónica")
        product = ProductText(name="Audífonos Bluetooth Pro", category="electronica")

        assert scorer.score(video, product) == pytest.approx(0.85)

    def test_score_is_capped_at_one(self, scorer):
        video = VideoText(product_name="Crema Facial", category="Belleza")
        product = ProductText(name="Crema Facial", category="Belleza")

        assert scorer.score(video, product) == 1.0

    def test_empty_product_name_scores_zero(self, scorer):
        video = VideoText(title="plancha de cabello", product_name="plancha de cabello")

        assert scorer.score(video, ProductText(name="")) == 0.0
        assert scorer.score(video, ProductText(name=None)) == 0.0
        assert scorer.score(video, ProductText(name="🔥!!")) == 0.0

    def test_empty_video_scores_zero(self, scorer):
        assert scorer.score(VideoText(), ProductText(name="Crema Facial")) == 0.0

    def test_score_is_deterministic(self, scorer):
        video = VideoText(title="Probé la crema hidratante de noche", product_name="crema noche")
        product = ProductText(name="Crema Hidratante Noche", category="Belleza")

        assert scorer.score(video, product) == scorer.score(video, product)

    @pytest.mark.parametrize(
        "video, product",
        [
            (VideoText(), ProductText()),
            (VideoText(title="a"), ProductText(name="a")),
            (VideoText(title="x" * 500), ProductText(name="x")),
            (VideoText(title="🎧", product_name="🎧", category="🎧"), ProductText(name="🎧", category="🎧")),
            (VideoText(title="crema", product_name="crema", category="b"), ProductText(name="crema", category="b")),
            (VideoText(title="Set de brochas de maquillaje profesional"), ProductText(name="Brochas")),
        ],
    )
    def test_score_is_bounded(self, scorer, video, product):
        assert 0.0 <= scorer.score(video, product) <= 1.0

    def test_long_titles_are_compared_by_prefix(self):
        title = "crema" + " lorem ipsum" * 20
        only_edit_similarity = {"containment_score": 0.0, "token_overlap_weight": 0.0}

        short_prefix = SimilarityScorer(MatchingConfig(title_prefix_length=5, **only_edit_similarity))
        long_prefix = SimilarityScorer(MatchingConfig(title_prefix_length=100, **only_edit_similarity))

        assert short_prefix.score(VideoText(title=title), ProductText(name="crema")) == pytest.approx(0.7)
        assert long_prefix.score(VideoText(title=title), ProductText(name="crema")) == pytest.approx(0.05 * 0.7)


def test_shared_numbers_do_not_count_as_token_overlap():
    only_token_overlap = SimilarityScorer(MatchingConfig(containment_score=0.0, title_similarity_weight=0.0))

    score = only_token_overlap.score(VideoText(title="Compré 500 cosas"), ProductText(name="Crema Corporal 500"))

    assert score == 0.0
