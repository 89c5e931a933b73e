"""
API view that runs the recurring appointment job (called by the scheduler).
"""
import hmac
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .recurrence import generate_recurring_appointments

logger = logging.getLogger(__name__)


def _job_secret_ok(request):
    expected = getattr(settings, 'RECURRING_JOB_SECRET', '')
    if not expected:
        return True
    provided = request.headers.get('X-Job-Secret', '')
    return hmac.compare_digest(provided.encode(), expected.encode())


@csrf_exempt
@require_http_methods(["POST"])
def generate_recurring(request):
    """
    Expand active recurring appointments for the coming week.
    """
    if not _job_secret_ok(request):
        logger.warning('Rejected recurring appointment job call with a bad secret')
        return JsonResponse({'error': 'Forbidden'}, status=403)

    result = generate_recurring_appointments()
    body = {
        'message': f"Created {result['count']} appointments from recurring templates",
        'count': result['count'],
    }
    if result['errors']:
        body['errors'] = result['errors']
    return JsonResponse(body)
