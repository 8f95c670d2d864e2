import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import Response

from ecommerce.baskets.models import Basket
from ecommerce.config import PaymentSettings
from ecommerce.utils.security import require_user
from ecommerce.utils.rate_limit import optional_rate_limit
from ecommerce.payments.dependencies import get_intent_synchronizer, get_settings, get_webhook_dispatcher
from ecommerce.payments.exceptions import BasketBusy, NotFound, ProviderError, VerificationError
from ecommerce.payments.service import IntentSynchronizer
from ecommerce.payments.webhooks import WebhookDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

# module ecommerce.payments.views
@router.get("/config")
def payments_config(settings: PaymentSettings = Depends(get_settings)) -> Dict[str, Any]:
    """Expose la clé publique Stripe au front (Stripe.js) et la devise utilisée."""
    return {"publishable_key": settings.publishable_key, "currency": settings.currency}

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request, dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher)):
    """
    Webhook Stripe (payment intents): met à jour le statut de la commande liée.
    - Signature: body brut + en-tête Stripe-Signature, vérifiés avec STRIPE_WEBHOOK_SECRET
    - Réponse: 200 sans corps dans tous les cas traités (ok, not_found, ambiguous, ignored),
      le détail est journalisé; Stripe ne regarde que le code HTTP
    - Erreurs: 400 si signature/payload invalide (Stripe signale la mauvaise configuration)
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    try:
        result = await dispatcher.dispatch(payload, signature)
    except VerificationError as e:
        logger.warning("payments.webhook rejected: %s", e)
        raise HTTPException(status_code=400, detail="Invalid Stripe webhook payload")
    logger.info("payments.webhook handled %s", result)
    return Response(status_code=200)

@router.post(
    "/{basket_id}",
    response_model=Basket,
    dependencies=[Depends(optional_rate_limit(times=10, seconds=60))],
)
async def create_or_update_payment_intent(
    basket_id: str,
    user: dict = Depends(require_user),
    synchronizer: IntentSynchronizer = Depends(get_intent_synchronizer),
):
    """
    Crée ou met à jour le payment intent Stripe du panier.
    - Sécurité: require_user + rate limit (10 req / 60s)
    - Retour: le panier avec prix réalignés, payment_intent_id et client_secret
    - Erreurs: 400 panier introuvable ou produit/livraison inexistant, 409 panier déjà en cours
      de synchronisation, 502 échec Stripe
    """
    try:
        basket = await synchronizer.synchronize(basket_id)
    except NotFound as e:
        logger.info("payments.intent basket=%s user=%s: %s", basket_id, user.get("id"), e)
        raise HTTPException(status_code=400, detail=str(e))
    except BasketBusy as e:
        logger.info("payments.intent basket=%s user=%s: %s", basket_id, user.get("id"), e)
        raise HTTPException(status_code=409, detail="Panier en cours de traitement, réessayez")
    except ProviderError:
        logger.exception("Erreur create_or_update_payment_intent basket=%s", basket_id)
        raise HTTPException(status_code=502, detail="Erreur du prestataire de paiement")
    if basket is None:
        raise HTTPException(status_code=400, detail="Problème avec votre panier")
    return basket
