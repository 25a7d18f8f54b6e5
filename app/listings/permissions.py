"""
Permission classes for the listing API.

- IsHostOrReadOnly: Anyone reads; only users with the host role create
- IsListingHostOrReadOnly: Only a listing's own host may change it
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView

    from listings.models import Listing


class IsHostOrReadOnly(permissions.BasePermission):
    message = "Only hosts can publish listings."

    def has_permission(self, request: Request, view: APIView) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated and request.user.is_host)


class IsListingHostOrReadOnly(permissions.BasePermission):
    message = "You can only change your own listings."

    def has_object_permission(self, request: Request, view: APIView, obj: Listing) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.host_id == request.user.id
