"""
Middleware for attaching request scope hints.
"""
from .utils import normalize_id


CAMPAIGN_HEADERS = ('HTTP_X_ACTIVE_CAMPAIGN', 'HTTP_X_CAMPAIGN_ID', 'HTTP_X_CAMPAIGN')
CHARACTER_HEADERS = ('HTTP_X_ACTIVE_CHARACTER', 'HTTP_X_CHARACTER_ID')
WORLD_HEADERS = ('HTTP_X_ACTIVE_WORLD', 'HTTP_X_WORLD_ID')


def _first_hint(request, header_names, query_name):
    for header in header_names:
        value = normalize_id(request.META.get(header))
        if value:
            return value
    return normalize_id(request.GET.get(query_name))


class ActiveContextMiddleware:
    """
    Middleware to collect the active campaign / character / world hints.

    Hints come from headers first (X-Active-Campaign, X-Campaign-Id, X-Campaign,
    X-Active-Character, X-Character-Id, X-Active-World, X-World-Id), then the
    query string (campaignId, characterId, worldId). Body fields are merged in
    later by the viewsets, once DRF has parsed the request body.

    The result is stored on request.active_context as a plain dict of
    trimmed, non-empty strings (or None).
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.active_context = extract_scope_hints(request)
        return self.get_response(request)


def extract_scope_hints(request):
    return {
        'campaign_id': _first_hint(request, CAMPAIGN_HEADERS, 'campaignId'),
        'character_id': _first_hint(request, CHARACTER_HEADERS, 'characterId'),
        'world_id': _first_hint(request, WORLD_HEADERS, 'worldId'),
    }
