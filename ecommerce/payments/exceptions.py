"""
Erreurs métier de la feature 'payments'.
Les vues les traduisent en HTTPException; les services ne connaissent pas HTTP.
"""


class PaymentsError(Exception):
    """Base de toutes les erreurs de paiement."""


class NotFound(PaymentsError):
    """Entité absente (produit, méthode de livraison)."""

    entity = "ressource"

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"{self.entity} introuvable: {identifier}")


class ProductNotFound(NotFound):
    entity = "Produit"


class DeliveryMethodNotFound(NotFound):
    entity = "Méthode de livraison"


class AmbiguousOrder(PaymentsError):
    """Plusieurs commandes partagent le même payment intent (données incohérentes)."""

    def __init__(self, intent_id: str, count: int):
        self.intent_id = intent_id
        self.count = count
        super().__init__(f"{count} commandes pour le payment intent {intent_id}")


class ProviderError(PaymentsError):
    """Échec d'un appel Stripe (réseau, validation, timeout). Jamais rejoué ici."""


class VerificationError(PaymentsError):
    """Webhook dont la signature ou le payload est invalide."""


class BasketBusy(PaymentsError):
    """Le panier est déjà en cours de synchronisation par un autre worker."""

    def __init__(self, basket_id: str):
        self.basket_id = basket_id
        super().__init__(f"Panier en cours de traitement: {basket_id}")
