"""
Contrôles d'accès côté serveur pour les endpoints JSON
Le rôle administrateur est vérifié à chaque requête via user.is_staff
"""
from functools import wraps

from django.http import JsonResponse


def api_login_required(view_func):
    """Comme login_required, mais répond 401 en JSON au lieu de rediriger"""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({
                'success': False,
                'error': 'Authentification requise',
                'code': 'auth_required',
            }, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped


def staff_required(view_func):
    """Réservé aux comptes staff, 401 si anonyme, 403 sinon"""
    @wraps(view_func)
    @api_login_required
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_staff:
            return JsonResponse({
                'success': False,
                'error': 'Accès réservé aux administrateurs',
                'code': 'access_denied',
            }, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped
