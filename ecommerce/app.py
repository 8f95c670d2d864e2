# module ecommerce.app
"""
Instance FastAPI globale, construite par la factory (ecommerce.app_setup.factory).
"""
from ecommerce.app_setup.factory import create_app

# App globale
app = create_app()
