from django.urls import path

from .views import (
    FieldAvailabilityView,
    FieldDetailView,
    FieldListView,
    ReservationCancelView,
    ReservationDetailView,
    ReservationListCreateView,
    ReservationStatusView,
)

urlpatterns = [
    path("fields/", FieldListView.as_view(), name="field-list"),
    path("fields/<int:field_id>/", FieldDetailView.as_view(), name="field-detail"),
    path(
        "fields/<int:field_id>/availability/",
        FieldAvailabilityView.as_view(),
        name="field-availability"
    ),

    path("reservations/", ReservationListCreateView.as_view(), name="reservation-list"),
    path(
        "reservations/<int:reservation_id>/",
        ReservationDetailView.as_view(),
        name="reservation-detail"
    ),
    path(
        "reservations/<int:reservation_id>/cancel/",
        ReservationCancelView.as_view(),
        name="reservation-cancel"
    ),
    path(
        "reservations/<int:reservation_id>/status/",
        ReservationStatusView.as_view(),
        name="reservation-status"
    ),
]
