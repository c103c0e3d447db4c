from django.db import models
from django.utils.translation import gettext_lazy as _

from adbroll.models.product import Creator, Product


class Video(models.Model):
    """
    A scraped short-form video.

    The matcher links a video to at most one Product. Products carry no reverse
    accessor: "videos for a product" is a query on this table.
    """

    class MatchType(models.TextChoices):
        DIRECT = "direct", _("Direct (URL)")
        FUZZY = "fuzzy", _("Fuzzy")
        AI = "ai", _("AI-assisted")

    video_url = models.URLField(max_length=2000)
    title = models.TextField(null=True, blank=True)
    product_name = models.TextField(
        null=True,
        blank=True,
        help_text=_("Product name declared by the creator."),
    )
    category = models.CharField(max_length=255, null=True, blank=True)

    creator_handle = models.CharField(max_length=255, null=True, blank=True)
    creator_name = models.CharField(max_length=255, null=True, blank=True)
    creator = models.ForeignKey(Creator, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    revenue = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)

    # --- Match state ---
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    product_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    product_revenue = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    product_sales = models.IntegerField(null=True, blank=True)
    match_confidence = models.FloatField(
        null=True,
        blank=True,
        help_text=_("0-1 score of the accepted match; 0 once attempted without a match."),
    )
    match_type = models.CharField(max_length=10, choices=MatchType.choices, null=True, blank=True)
    match_attempted_at = models.DateTimeField(null=True, blank=True)

    imported_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Video")
        verbose_name_plural = _("Videos")
        indexes = [
            models.Index(fields=["product", "match_attempted_at"], name="video_product_attempt_idx"),
        ]

    @property
    def is_attempted_unmatched(self) -> bool:
        return self.product_id is None and self.match_confidence == 0 and self.match_attempted_at is not None

    def __str__(self):
        return f"Video ({self.id}) - {(self.title or self.video_url)[:60]}"
