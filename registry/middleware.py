from django.http import JsonResponse


class SupersededApiMiddleware:
    """Return 410 for the superseded bare ``/api`` patient endpoint.

    That endpoint stored denormalized patient rows and hard-deleted
    them; all clients must use ``/api/patients`` instead.
    """
    LEGACY_PATHS = ('/api', '/api/')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if (request.path or '') in self.LEGACY_PATHS:
            return JsonResponse(
                {'success': False, 'message': 'Este endpoint foi descontinuado. Use /api/patients.'},
                status=410,
            )
        return self.get_response(request)
