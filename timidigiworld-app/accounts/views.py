import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from payments.exceptions import MarketplaceError
from payments.responses import error_response, parse_json_body, server_error_response
from payments.services.settlement import SettlementService
from .decorators import api_login_required
from .services import PayoutProfileService

logger = logging.getLogger(__name__)


def _bank_account_data(bank_account):
    if bank_account is None or not bank_account.is_complete():
        return None
    return {
        'bank_name': bank_account.bank_name,
        'bank_code': bank_account.bank_code,
        'account_number': bank_account.masked_account_number,
        'account_name': bank_account.account_name,
        'subaccount_code': bank_account.subaccount_code,
        'verified_at': bank_account.verified_at.isoformat() if bank_account.verified_at else None,
    }


@api_login_required
@require_http_methods(["GET", "POST", "DELETE"])
def payout_profile(request):
    """
    Coordonnées bancaires du vendeur connecté
    GET : consultation, POST : vérification Paystack et enregistrement, DELETE : suppression
    """
    try:
        if request.method == 'GET':
            bank_account = PayoutProfileService.get_for_seller(request.user)
            pending = SettlementService.pending_payout_total(request.user)
            return JsonResponse({
                'success': True,
                'bank_account': _bank_account_data(bank_account),
                'pending_payouts': {'count': pending['count'], 'amount': str(pending['amount'])},
            })

        if request.method == 'DELETE':
            PayoutProfileService.clear(request.user)
            return JsonResponse({'success': True, 'bank_account': None})

        data = parse_json_body(request)
        bank_account = PayoutProfileService.verify_and_save(
            request.user,
            bank_name=data.get('bank_name'),
            bank_code=data.get('bank_code'),
            account_number=data.get('account_number'),
            create_subaccount=bool(data.get('create_subaccount')),
        )

        # Les ventes en attente de versement sont réglées dès que le compte est vérifié
        splits = SettlementService.retry_pending_payouts(seller=request.user)
        return JsonResponse({
            'success': True,
            'bank_account': _bank_account_data(bank_account),
            'payouts_released': sum(1 for split in splits if split.seller_paid),
        })

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans payout_profile: {str(e)}")
        return server_error_response()
