import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT COUNT(*) FROM dispatches WHERE completed = %s', [False])
            row = c.fetchone()
        return JsonResponse({'ok': True, 'db': True, 'activeDispatches': row[0] if row else 0})
    except DatabaseError:
        logger.exception("Health check could not reach the dispatch store")
        return JsonResponse({'ok': False, 'db': False, 'error': 'Dispatch store unavailable.'}, status=500)
