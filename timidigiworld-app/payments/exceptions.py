"""
Erreurs métier du pipeline paiement / règlement / livraison
Chaque erreur porte le code HTTP et le message affiché au client
"""


class MarketplaceError(Exception):
    """Erreur de base, rendue en JSON par les vues"""
    status_code = 500
    code = 'error'
    default_message = 'Une erreur est survenue, veuillez réessayer'

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    status_code = 400
    code = 'validation_error'
    default_message = 'Données invalides'


class NotFoundError(MarketplaceError):
    status_code = 404
    code = 'not_found'
    default_message = 'Ressource introuvable'


class ProductNotFound(NotFoundError):
    code = 'product_not_found'
    default_message = 'Produit introuvable'


class OrderNotFound(NotFoundError):
    code = 'order_not_found'
    default_message = 'Aucune commande ne correspond à cette référence'


class AuthError(MarketplaceError):
    status_code = 401
    code = 'auth_required'
    default_message = 'Authentification requise'


class AccessDenied(AuthError):
    status_code = 403
    code = 'access_denied'
    default_message = 'Accès refusé'


class GatewayError(MarketplaceError):
    """Le fournisseur de paiement ou d'email a refusé la requête ou n'a pas répondu"""
    status_code = 502
    code = 'gateway_error'
    default_message = 'Le service de paiement est indisponible, veuillez réessayer'


class GatewayInitError(GatewayError):
    code = 'gateway_init_error'
    default_message = "Erreur lors de l'initialisation du paiement"


class PaymentNotConfirmed(MarketplaceError):
    status_code = 402
    code = 'payment_not_confirmed'
    default_message = "Le paiement n'a pas été confirmé"


class StateConflict(MarketplaceError):
    status_code = 409
    code = 'state_conflict'
    default_message = "La commande a été modifiée entre-temps"
    soft = False


class AlreadyProcessed(StateConflict):
    """Vérification répétée : succès silencieux pour l'acheteur"""
    code = 'already_processed'
    default_message = 'Cette commande a déjà été traitée'
    soft = True


class InvalidTransition(StateConflict):
    code = 'invalid_transition'
    default_message = 'Changement de statut non autorisé'


class PayoutDeferred(MarketplaceError):
    """Versement vendeur reporté, jamais renvoyé au client"""
    code = 'payout_deferred'
    default_message = 'Versement vendeur en attente'


class InvalidToken(MarketplaceError):
    status_code = 403
    code = 'invalid_token'
    default_message = 'Lien de téléchargement invalide ou expiré'


class FileUnavailable(MarketplaceError):
    status_code = 404
    code = 'file_unavailable'
    default_message = 'Fichier indisponible'


class WrongProductType(MarketplaceError):
    status_code = 400
    code = 'wrong_product_type'
    default_message = "Ce produit n'est pas un produit numérique"


class NoDeliveryAddress(MarketplaceError):
    status_code = 400
    code = 'no_delivery_address'
    default_message = 'Aucune adresse email de livraison disponible'
