from django.contrib import admin

from adbroll.models import Creator, MatchJob, Product, Video


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "commission", "total_revenue", "updated_at")
    list_filter = ("category",)
    search_fields = ("name", "product_url")


@admin.register(Video)
class VideoAdmin(admin.ModelAdmin):
    list_display = ("title", "creator_handle", "product", "match_type", "match_confidence", "match_attempted_at")
    list_filter = ("match_type",)
    search_fields = ("title", "product_name", "creator_handle", "video_url")
    raw_id_fields = ("product", "creator")


@admin.register(MatchJob)
class MatchJobAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "status", "attempts", "max_attempts", "created_at", "finished_at")
    list_filter = ("kind", "status")
    readonly_fields = ("result", "last_error", "started_at", "finished_at")


admin.site.register(Creator)
