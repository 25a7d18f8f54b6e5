"""Django admin configuration for bookings."""

from django.contrib import admin

from bookings.models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "listing",
        "guest",
        "check_in",
        "check_out",
        "total_price",
        "status",
        "created_at",
    ]
    list_filter = ["status", "check_in"]
    search_fields = ["listing__title", "guest__email"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["listing", "guest"]
    date_hierarchy = "check_in"
    ordering = ["-created_at"]
