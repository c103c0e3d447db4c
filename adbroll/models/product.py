from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """A TikTok Shop product from the imported catalog."""

    name = models.CharField(_("Name"), max_length=500, help_text=_("Display name, the primary matching key."))
    product_url = models.URLField(
        _("Product URL"),
        max_length=2000,
        null=True,
        blank=True,
        help_text=_("Canonical shop URL used for direct matches."),
    )
    category = models.CharField(max_length=255, null=True, blank=True, db_index=True)

    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    # Percentage, e.g. 15.00 means 15 %
    commission = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    commission_amount = models.DecimalField(
        _("Earning per sale"),
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Derived: price x commission rate. Recomputed by the index rebuild."),
    )

    total_revenue = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    total_sales = models.IntegerField(null=True, blank=True)
    revenue_30d = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    gmv_30d = models.DecimalField(_("GMV 30d"), max_digits=16, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")

    def __str__(self):
        return f"Product ({self.id}) - {self.name or 'No name'}"


class Creator(models.Model):
    """A TikTok creator; videos are linked to creators by handle."""

    handle = models.CharField(max_length=255, unique=True)
    name = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"@{self.handle}"
