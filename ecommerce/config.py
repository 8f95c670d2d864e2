# ecommerce.config
from pathlib import Path
import os
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend e-commerce.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe, Redis), CORS/hosts
- Regroupe les réglages de paiement dans PaymentSettings, injecté explicitement
  dans les services (aucun service ne lit ces constantes directement)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

# Supabase: URLs et clés (public/anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Redis: stockage des paniers + rate limiting
REDIS_URL = _clean_env(os.getenv("REDIS_URL") or os.getenv("RATE_LIMIT_REDIS_URL") or "redis://127.0.0.1:6379/0")
BASKET_TTL_DAYS = int(os.getenv("BASKET_TTL_DAYS", "30"))
# Verrou Redis par panier (entre workers): durée de vie et attente max
BASKET_LOCK_TIMEOUT_SECONDS = float(os.getenv("BASKET_LOCK_TIMEOUT_SECONDS", "30"))
BASKET_LOCK_WAIT_SECONDS = float(os.getenv("BASKET_LOCK_WAIT_SECONDS", "10"))

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Stripe: clés publiques/privées et secret webhook (jamais en dur dans le code)
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_CURRENCY = _clean_env(os.getenv("STRIPE_CURRENCY") or "usd").lower()
STRIPE_TIMEOUT_SECONDS = float(os.getenv("STRIPE_TIMEOUT_SECONDS", "10"))

# Statut de commande: refuser qu'un échec tardif écrase un paiement reçu
PAYMENT_STATUS_MONOTONIC = _env_flag("PAYMENT_STATUS_MONOTONIC", "true")


class PaymentSettings(BaseModel):
    """
    Réglages de la feature 'payments', construits une fois au démarrage.
    - secret_key / webhook_secret: secrets Stripe (out-of-band, .env ou secret store)
    - currency / payment_method_types: fixes pour tous les payment intents
    - timeout_seconds: borne des appels Stripe (échec dur au-delà)
    - monotonic_status: garde contre la régression PaymentReceived -> PaymentFailed
    """
    model_config = ConfigDict(frozen=True)

    secret_key: str = ""
    publishable_key: str = ""
    webhook_secret: str = ""
    currency: str = "usd"
    payment_method_types: tuple[str, ...] = ("card",)
    timeout_seconds: float = 10.0
    monotonic_status: bool = True
    basket_ttl_days: int = 30


def get_payment_settings() -> PaymentSettings:
    """Construit PaymentSettings depuis les constantes d'environnement ci-dessus."""
    return PaymentSettings(
        secret_key=STRIPE_SECRET_KEY,
        publishable_key=STRIPE_PUBLIC_KEY,
        webhook_secret=STRIPE_WEBHOOK_SECRET,
        currency=STRIPE_CURRENCY,
        timeout_seconds=STRIPE_TIMEOUT_SECONDS,
        monotonic_status=PAYMENT_STATUS_MONOTONIC,
        basket_ttl_days=BASKET_TTL_DAYS,
    )
