"""
JSON API views for membership registration.
"""
import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import AllocationFailed, RegistrationError, UnknownCategory
from .models import MembershipCategory
from .registration import register_member
from .serializers import MembershipCategorySerializer, RegistrationRequestSerializer

logger = logging.getLogger(__name__)


def _parse_body_json(request):
    """Read JSON body and return dict. Return {} if not JSON or invalid."""
    if request.content_type and 'application/json' in request.content_type:
        try:
            body = json.loads(request.body)
        except (json.JSONDecodeError, TypeError, UnicodeDecodeError):
            return {}
        return body if isinstance(body, dict) else {}
    return {}


def _first_error(errors):
    """Flatten DRF serializer errors to a single readable message."""
    for field, messages in errors.items():
        if messages:
            return f"{field}: {messages[0]}"
    return 'Invalid request'


@csrf_exempt
@require_http_methods(["POST"])
def register(request):
    """
    Register a member and issue their GNACOPS ID.
    Body: { fullName, email, password, categoryId, formData }
    """
    serializer = RegistrationRequestSerializer(data=_parse_body_json(request))
    if not serializer.is_valid():
        return JsonResponse({
            'success': False,
            'error': _first_error(serializer.errors),
            'errors': serializer.errors,
        }, status=400)

    data = serializer.validated_data
    try:
        membership = register_member(
            full_name=data['fullName'].strip(),
            email=data['email'],
            password=data['password'],
            category_id=data['categoryId'],
            form_data=data.get('formData'),
        )
    except AllocationFailed as e:
        logger.error(f"Registration error: {str(e)}")
        return JsonResponse({
            'success': False,
            'error': 'Failed to generate serial number, please try again',
        }, status=503)
    except (RegistrationError, UnknownCategory) as e:
        logger.warning(f"Registration rejected for {data['email']}: {str(e)}")
        return JsonResponse({'success': False, 'error': str(e)}, status=400)

    return JsonResponse({
        'success': True,
        'gnacopsId': membership.gnacops_id,
        'message': 'Registration successful',
    }, status=201)


@require_http_methods(["GET"])
def categories(request):
    """List the categories currently open for registration."""
    queryset = MembershipCategory.objects.filter(is_active=True)
    return JsonResponse({
        'categories': MembershipCategorySerializer(queryset, many=True).data,
    })
