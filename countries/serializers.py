from rest_framework import serializers
from .models import Country


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = [
            'id', 'name', 'capital', 'region', 'population',
            'currency_code', 'exchange_rate', 'estimated_gdp',
            'flag_url', 'last_refreshed_at'
        ]
        read_only_fields = fields


class UpstreamCountrySerializer(serializers.Serializer):
    """
    Validates one entry of the upstream country list before it is derived and stored:
    - name is required
    - population must be a non-negative integer; missing or null counts as 0
    - currencies may be missing or null; only the first entry is read, so its items are not validated
    """
    name = serializers.CharField(max_length=200)
    capital = serializers.CharField(allow_null=True, allow_blank=True, default=None)
    region = serializers.CharField(allow_null=True, allow_blank=True, default=None)
    population = serializers.IntegerField(min_value=0, allow_null=True, default=0)
    flag = serializers.CharField(allow_null=True, allow_blank=True, default=None)
    currencies = serializers.ListField(allow_null=True, default=list)

    def validate_population(self, value):
        return value or 0


class StatusSerializer(serializers.Serializer):
    total_countries = serializers.IntegerField()
    last_refreshed_at = serializers.DateTimeField(allow_null=True)
