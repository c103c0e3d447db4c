from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)


class MatchBatchSummary(_CamelModel):
    """Outcome of one ``match_batch`` invocation."""

    offset: int = Field(description="Offset the batch started from")
    batch_size: int
    threshold: float

    processed: int = Field(0, description="Videos scored in this batch")
    matched: int = Field(0, description="Matches written in this batch, all types")
    direct: int = 0
    fuzzy: int = 0
    ai: int = 0
    unmatched: int = Field(0, description="Videos marked attempted-unmatched in this batch")
    skipped: int = Field(0, description="Previously attempted videos stepped over")
    errors: int = Field(0, description="Per-video write failures")

    next_offset: int = Field(0, description="Offset to pass to the following call")
    remaining: int = Field(0, description="Unmatched videos the matcher has not attempted yet")
    complete: bool = False


class RebuildSummary(_CamelModel):
    """Outcome of a full index rebuild."""

    threshold: float
    products_updated: int = 0
    matches_cleared: int = 0
    creators_linked: int = 0
    batches: int = 0
    videos_processed: int = 0
    videos_matched: int = 0
    videos_unmatched: int = 0
    errors: int = 0
    total_videos: int = 0
    videos_with_product: int = 0
    videos_without_product: int = 0
    videos_with_creator: int = 0
