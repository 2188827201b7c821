"""
Street catalog endpoint.

The catalog is curated outside the API (Django admin or the
``load_streets`` command); clients only read it to offer valid names.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Street


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_streets(request):
    """Return every street ordered by name."""
    data: list[dict[str, object]] = []
    for street in Street.objects.order_by('name', 'id'):
        data.append({
            'id': street.id,
            'name': street.name,
            'street_type': street.street_type,
        })
    return Response({'success': True, 'data': data})
