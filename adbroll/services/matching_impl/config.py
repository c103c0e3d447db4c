from dataclasses import dataclass, field, replace
from typing import FrozenSet

from django.conf import settings

DEFAULT_STOP_WORDS: FrozenSet[str] = frozenset(
    {
        # Spanish function words
        "de", "el", "la", "los", "las", "un", "una", "para", "con", "y", "o", "en", "a", "del", "al",
        "por", "que", "se", "es", "su", "sus", "mas", "como", "pero", "le", "ya", "este", "esta",
        "estos", "estas", "mi", "mis", "tu", "tus",
        # Marketing filler that never identifies a product
        "tipo", "precio", "descuento", "oferta", "gratis", "envio", "nuevo", "nueva", "original", "pro",
    }
)  # fmt: skip


@dataclass(frozen=True)
class MatchingConfig:
    """Tunable knobs for scoring and batch matching.

    Attributes:
        acceptance_threshold: Minimum score for the best candidate to be accepted.
        stop_words: Normalized words ignored when tokenizing.
        min_token_length: Tokens must be strictly longer than this to count.
        token_similarity_threshold: Edit-distance similarity at which two tokens are a near match.
        title_prefix_length: Characters of the title compared against the whole product name.
    """

    acceptance_threshold: float = 0.55
    stop_words: FrozenSet[str] = field(default_factory=lambda: DEFAULT_STOP_WORDS)
    min_token_length: int = 2
    token_similarity_threshold: float = 0.8
    title_prefix_length: int = 100

    # Title-based weights
    containment_score: float = 0.85
    token_overlap_weight: float = 0.75
    title_similarity_weight: float = 0.7

    # Explicit product-name weights
    explicit_containment_score: float = 0.9
    explicit_similarity_weight: float = 0.85

    category_bonus: float = 0.1

    # AI fallback pass
    ai_match_confidence: float = 0.6
    ai_chunk_size: int = 20
    ai_max_videos: int = 100

    @classmethod
    def from_settings(cls) -> "MatchingConfig":
        """Builds a config, overriding defaults with the MATCH_* Django settings."""
        defaults = cls()
        return replace(
            defaults,
            acceptance_threshold=getattr(settings, "MATCH_ACCEPTANCE_THRESHOLD", defaults.acceptance_threshold),
            ai_chunk_size=getattr(settings, "MATCH_AI_CHUNK_SIZE", defaults.ai_chunk_size),
            ai_max_videos=getattr(settings, "MATCH_AI_MAX_VIDEOS", defaults.ai_max_videos),
        )
