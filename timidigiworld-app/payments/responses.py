"""
Enveloppes JSON communes aux vues de l'API
"""
import json

from django.http import JsonResponse

from .exceptions import MarketplaceError, ValidationError


def error_response(error: MarketplaceError) -> JsonResponse:
    """Rend une erreur métier avec son code HTTP"""
    if getattr(error, 'soft', False):
        payload = {
            'success': True,
            'already_processed': True,
            'message': error.message,
        }
        payload.update(error.context)
        return JsonResponse(payload, status=200)

    return JsonResponse({
        'success': False,
        'error': error.message,
        'code': error.code,
    }, status=error.status_code)


def server_error_response() -> JsonResponse:
    return JsonResponse({
        'success': False,
        'error': 'Une erreur est survenue, veuillez réessayer',
        'code': 'server_error',
    }, status=500)


def parse_json_body(request) -> dict:
    """Corps JSON de la requête, ou données de formulaire à défaut"""
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body.decode('utf-8') or '{}')
        except (ValueError, UnicodeDecodeError):
            raise ValidationError("Corps JSON invalide")
        if not isinstance(data, dict):
            raise ValidationError("Corps JSON invalide")
        return data
    return request.POST.dict()
