"""Django admin configuration for listings and reviews."""

from django.contrib import admin

from listings.models import Listing, Review


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    raw_id_fields = ["author"]
    readonly_fields = ["created_at"]


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "host", "location", "category", "rate", "rating", "reviews_count"]
    list_filter = ["category", "created_at"]
    search_fields = ["title", "location", "host__email"]
    readonly_fields = ["rating", "reviews_count", "created_at", "updated_at"]
    raw_id_fields = ["host"]
    filter_horizontal = ["saved_by"]
    inlines = [ReviewInline]
    ordering = ["-created_at"]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ["id", "listing", "author", "rating", "created_at"]
    list_filter = ["rating"]
    search_fields = ["listing__title", "author__email", "comment"]
    raw_id_fields = ["listing", "author"]
