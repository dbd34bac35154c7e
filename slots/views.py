from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from Field.service import FieldDirectory
from slots.serializers import SlotQuerySerializer
from slots.services import build_slots_response


class SlotListView(APIView):
    """
    Public API
    Hourly slot grid for a field on a date (?field_id=&date=YYYY-MM-DD)
    """
    permission_classes = [AllowAny]

    def get(self, request):
        serializer = SlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        field = FieldDirectory.get_field(serializer.validated_data["field_id"])
        data = build_slots_response(field, serializer.validated_data["date"])

        return Response({
            "status": "success",
            "data": data
        })
