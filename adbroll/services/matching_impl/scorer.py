"""
Confidence scoring between one video and one catalog product.

The score is the maximum of two bases, plus a small category bonus:

- Title basis: containment of the product name in the title (or the reverse),
  the share of product tokens found among the title tokens, and whole-string
  edit similarity against a bounded title prefix.
- Explicit basis: the product name the creator declared on the video, which is
  trusted more than free-form titles.

Edit similarity is ``1 - levenshtein(a, b) / max(len(a), len(b))`` and is 1.0
for two empty strings.
"""

from dataclasses import dataclass
from typing import List, Optional

from rapidfuzz.distance import Levenshtein

from .config import MatchingConfig
from .normalizer import normalize_text, tokenize


@dataclass(frozen=True)
class VideoText:
    """Text fields of a video that take part in scoring."""

    title: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class ProductText:
    """Text fields of a catalog product that take part in scoring."""

    name: Optional[str] = None
    category: Optional[str] = None


def levenshtein_similarity(a: str, b: str) -> float:
    """Normalized edit similarity in [0, 1]."""
    return Levenshtein.normalized_similarity(a, b)


class SimilarityScorer:
    """Scores how likely a video promotes a given product."""

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def score(self, video: VideoText, product: ProductText) -> float:
        """
        Computes a 0-1 match confidence.

        Args:
            video: The video's title, declared product name and category.
            product: The candidate product's name and category.

        Returns:
            The capped score. 0.0 when the product has no usable name.
        """
        product_name = normalize_text(product.name)
        if not product_name:
            return 0.0

        title = normalize_text(video.title)
        explicit_name = normalize_text(video.product_name)

        best = max(
            self._title_score(title, product_name),
            self._explicit_score(explicit_name, product_name),
        )

        video_category = normalize_text(video.category)
        if video_category and video_category == normalize_text(product.category):
            best += self.config.category_bonus

        return min(max(best, 0.0), 1.0)

    def _title_score(self, title: str, product_name: str) -> float:
        if not title:
            return 0.0

        scores = [0.0]
        if product_name in title or title in product_name:
            scores.append(self.config.containment_score)

        scores.append(self._token_overlap(tokenize(title, self.config), tokenize(product_name, self.config)) * self.config.token_overlap_weight)

        prefix = title[: self.config.title_prefix_length]
        scores.append(levenshtein_similarity(prefix, product_name) * self.config.title_similarity_weight)

        return max(scores)

    def _token_overlap(self, title_tokens: List[str], product_tokens: List[str]) -> float:
        """Fraction of product tokens that appear (exactly or nearly) in the title."""
        if not product_tokens or not title_tokens:
            return 0.0

        matched = 0
        for product_token in product_tokens:
            for title_token in title_tokens:
                if product_token == title_token or levenshtein_similarity(product_token, title_token) >= self.config.token_similarity_threshold:
                    matched += 1
                    break
        return matched / len(product_tokens)

    def _explicit_score(self, explicit_name: str, product_name: str) -> float:
        if not explicit_name:
            return 0.0
        if explicit_name == product_name:
            return 1.0
        if product_name in explicit_name or explicit_name in product_name:
            return self.config.explicit_containment_score
        return levenshtein_similarity(explicit_name, product_name) * self.config.explicit_similarity_weight
