from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from slots.services import build_availability_response

from .constants import ReservationStatus
from .serializers import (
    DateQuerySerializer,
    FieldSerializer,
    ReservationCreateSerializer,
    ReservationFilterSerializer,
    ReservationSerializer,
    ReservationStatusSerializer,
)
from .service import FieldDirectory, ReservationDraft, ReservationStore


# -------------------------------------------------------------------
# FIELD LIST (ALL ACTIVE FIELDS)
# -------------------------------------------------------------------
class FieldListView(APIView):
    """
    Public API
    List all bookable fields
    """
    permission_classes = [AllowAny]

    def get(self, request):
        serializer = FieldSerializer(FieldDirectory.list_fields(), many=True)
        return Response(
            {"status": "success", "data": serializer.data},
            status=status.HTTP_200_OK
        )


# -------------------------------------------------------------------
# FIELD DETAIL (SINGLE FIELD)
# -------------------------------------------------------------------
class FieldDetailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, field_id):
        field = FieldDirectory.get_field(field_id)
        return Response({"status": "success", "data": FieldSerializer(field).data})


# -------------------------------------------------------------------
# FIELD AVAILABILITY (DATE-BASED BOOKED RANGES)
# -------------------------------------------------------------------
class FieldAvailabilityView(APIView):
    """
    Public API
    Returns operating hours and booked ranges for a field on a date
    """
    permission_classes = [AllowAny]

    def get(self, request, field_id):
        # Validate query params (?date=YYYY-MM-DD)
        serializer = DateQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        field = FieldDirectory.get_field(field_id)
        data = build_availability_response(field, serializer.validated_data["date"])

        return Response({"status": "success", "data": data})


# -------------------------------------------------------------------
# RESERVATIONS (SUBMIT + LIST)
# -------------------------------------------------------------------
class ReservationListCreateView(APIView):
    """
    Authenticated API
    GET lists the caller's reservations (staff see all)
    POST submits a pending reservation awaiting payment verification
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        filters = ReservationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        now = timezone.now()
        reservations = ReservationStore.search(
            user=None if request.user.is_staff else request.user,
            status=params.get("status"),
            field_id=params.get("field_id"),
            booking_date=params.get("date"),
            now=now,
        )

        serializer = ReservationSerializer(
            reservations, many=True, context={"now": now}
        )
        return Response({"status": "success", "data": serializer.data})

    def post(self, request):
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # Request context is passed in explicitly; the store reads no session state
        draft = ReservationDraft(
            field_id=data["field_id"],
            booking_date=data["date"],
            start_time=data["start_time"],
            duration_hours=data["duration_hours"],
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            notes=data["notes"],
            user=request.user,
        )
        reservation = ReservationStore.create_reservation(draft)

        return Response({
            "status": "success",
            "message": "Reservation created, awaiting payment verification",
            "data": ReservationSerializer(reservation).data,
        }, status=status.HTTP_201_CREATED)


def _owned_reservation(request, reservation_id):
    reservation = ReservationStore.get_reservation(reservation_id)
    if not request.user.is_staff and reservation.user_id != request.user.id:
        raise PermissionDenied("You can only access your own reservations")
    return reservation


# -------------------------------------------------------------------
# RESERVATION DETAIL
# -------------------------------------------------------------------
class ReservationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, reservation_id):
        reservation = _owned_reservation(request, reservation_id)
        return Response({
            "status": "success",
            "data": ReservationSerializer(reservation).data,
        })


# -------------------------------------------------------------------
# RESERVATION CANCEL (OWNER OR STAFF)
# -------------------------------------------------------------------
class ReservationCancelView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, reservation_id):
        _owned_reservation(request, reservation_id)

        reservation = ReservationStore.update_status(
            reservation_id, ReservationStatus.CANCELLED
        )
        return Response({
            "status": "success",
            "message": "Reservation cancelled",
            "data": ReservationSerializer(reservation).data,
        })


# -------------------------------------------------------------------
# RESERVATION STATUS (ADMIN PAYMENT VERIFICATION)
# -------------------------------------------------------------------
class ReservationStatusView(APIView):
    """
    Admin API
    Confirms a pending reservation after payment is verified,
    or cancels it
    """
    permission_classes = [IsAuthenticated, IsAdminUser]

    def patch(self, request, reservation_id):
        serializer = ReservationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reservation = ReservationStore.update_status(
            reservation_id, serializer.validated_data["status"]
        )
        return Response({
            "status": "success",
            "data": ReservationSerializer(reservation).data,
        })
