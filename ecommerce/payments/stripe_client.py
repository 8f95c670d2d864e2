"""
Adaptateur Stripe: centralise les appels Payment Intents et la vérification des webhooks.
- La clé API est passée à chaque requête (api_key=...): aucun état global stripe.api_key.
- Le SDK étant synchrone, les appels réseau passent par un thread (asyncio.to_thread).
- Chaque appel est borné par settings.timeout_seconds; au-delà: ProviderError.
"""
import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence

import stripe

from ecommerce.config import PaymentSettings
from ecommerce.payments.exceptions import ProviderError, VerificationError
from ecommerce.payments.ports import IntentResult

logger = logging.getLogger(__name__)

# module ecommerce.payments.stripe_client
class StripeProvider:
    """Implémentation de PaymentProvider adossée au SDK stripe-python."""

    def __init__(self, settings: PaymentSettings):
        self.settings = settings

    async def _call(self, operation: str, fn, *args, **kwargs):
        if not self.settings.secret_key:
            raise ProviderError("STRIPE_SECRET_KEY manquant")
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args, api_key=self.settings.secret_key, **kwargs),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error("payments.stripe %s timeout after %ss", operation, self.settings.timeout_seconds)
            raise ProviderError(f"Stripe {operation}: timeout") from e
        except stripe.StripeError as e:
            logger.exception("payments.stripe %s failed", operation)
            raise ProviderError(f"Stripe {operation}: {e.user_message or e}") from e

    async def create_intent(self, amount: int, currency: str, method_types: Sequence[str]) -> IntentResult:
        """
        Crée un PaymentIntent Stripe.
        - amount: en centimes
        - method_types: ex ["card"]
        Retour: IntentResult(id, client_secret)
        """
        intent = await self._call(
            "create_intent",
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            payment_method_types=list(method_types),
        )
        return IntentResult(id=intent["id"], client_secret=intent["client_secret"])

    async def update_intent(self, intent_id: str, amount: int) -> None:
        """Met à jour uniquement le montant d'un PaymentIntent existant."""
        await self._call("update_intent", stripe.PaymentIntent.modify, intent_id, amount=amount)

    def construct_event(self, payload: bytes, signature: Optional[str], secret: str) -> Mapping[str, Any]:
        """
        Parse et valide un événement Stripe signé (webhook).
        - payload: body brut, signature: en-tête Stripe-Signature
        - Soulève VerificationError si le secret, la signature ou le JSON est invalide (fail closed).
        """
        if not secret:
            raise VerificationError("STRIPE_WEBHOOK_SECRET manquant")
        if not signature:
            raise VerificationError("En-tête Stripe-Signature manquant")
        try:
            return stripe.Webhook.construct_event(payload, signature, secret)
        except stripe.SignatureVerificationError as e:
            raise VerificationError("Signature Stripe invalide") from e
        except ValueError as e:
            raise VerificationError("Payload Stripe invalide") from e
