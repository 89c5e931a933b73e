from rest_framework import serializers

from .exceptions import UnknownCategory
from .models import MembershipCategory
from .utils import get_category_code


class RegistrationRequestSerializer(serializers.Serializer):
    """Validates the JSON body of a registration request."""
    fullName = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True, trim_whitespace=False)
    categoryId = serializers.IntegerField(min_value=1)
    formData = serializers.DictField(required=False, default=dict)

    def validate_formData(self, value):
        for field in ('region', 'phone'):
            if value.get(field) is not None and not isinstance(value[field], str):
                raise serializers.ValidationError(f'{field} must be a string')
        return value


class MembershipCategorySerializer(serializers.ModelSerializer):
    tier_code = serializers.SerializerMethodField()

    class Meta:
        model = MembershipCategory
        fields = ['id', 'name', 'description', 'price', 'position', 'tier_code']

    def get_tier_code(self, obj):
        try:
            return get_category_code(obj.name)
        except UnknownCategory:
            return None
