# slots/serializers.py
from rest_framework import serializers


class SlotQuerySerializer(serializers.Serializer):
    field_id = serializers.IntegerField(min_value=1)
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
