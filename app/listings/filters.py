import django_filters as filters

from bookings.services import BookingService
from listings.models import Listing


class ListingFilter(filters.FilterSet):
    """
    Browse filters for GET /listings/.

    ``check_in`` and ``check_out`` together hide listings with a confirmed
    booking overlapping that range. ``amenities`` is a comma separated list;
    a listing must have every one of them.
    """

    location = filters.CharFilter(field_name="location", lookup_expr="icontains")
    host = filters.NumberFilter(field_name="host_id")
    min_price = filters.NumberFilter(field_name="rate", lookup_expr="gte")
    max_price = filters.NumberFilter(field_name="rate", lookup_expr="lte")
    guests = filters.NumberFilter(field_name="max_guests", lookup_expr="gte")
    amenities = filters.CharFilter(method="filter_amenities")
    check_in = filters.DateFilter(method="filter_available")
    check_out = filters.DateFilter(method="filter_available")

    class Meta:
        model = Listing
        fields = ["category", "location", "host", "min_price", "max_price", "guests"]

    def filter_amenities(self, queryset, name, value):
        wanted = {item.strip() for item in value.split(",") if item.strip()}
        if not wanted:
            return queryset

        # JSON containment lookups are not available on every backend
        matching_ids = [
            pk
            for pk, amenities in queryset.values_list("id", "amenities")
            if wanted.issubset(amenities or [])
        ]
        return queryset.filter(id__in=matching_ids)

    def filter_available(self, queryset, name, value):
        check_in = self.form.cleaned_data.get("check_in")
        check_out = self.form.cleaned_data.get("check_out")
        if not (check_in and check_out) or check_out <= check_in:
            return queryset
        # Both params route here; exclude once
        if name != "check_out":
            return queryset
        return queryset.exclude(id__in=BookingService.unavailable_listing_ids(check_in, check_out))
