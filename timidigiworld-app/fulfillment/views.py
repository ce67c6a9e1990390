"""
Vues de la passerelle de téléchargement sécurisée
"""
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from accounts.decorators import api_login_required
from payments.exceptions import MarketplaceError, ValidationError
from payments.responses import error_response, parse_json_body, server_error_response
from .services import SecureDownloadService

logger = logging.getLogger(__name__)


@api_login_required
@require_http_methods(["POST"])
def issue_download(request):
    """
    Émet un lien de téléchargement temporaire pour une commande payée de l'utilisateur
    """
    try:
        data = parse_json_body(request)
        order_id = data.get('order_id')
        if not order_id:
            raise ValidationError("Commande manquante")

        result = SecureDownloadService.issue(request.user, order_id)
        return JsonResponse({
            'success': True,
            'download_url': request.build_absolute_uri(result['download_path']),
            'expires_at': result['expires_at'].isoformat(),
        })

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans issue_download: {str(e)}")
        return server_error_response()


@require_http_methods(["GET"])
def redeem_download(request, token):
    """
    Télécharge le fichier d'une commande avec un jeton valide
    Le jeton d'un acheteur inscrit exige en plus sa session
    """
    try:
        return SecureDownloadService.redeem(request.user, token)
    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans redeem_download: {str(e)}")
        return server_error_response()
