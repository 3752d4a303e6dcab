"""
API route modules.

Contains FastAPI routers for the calculators, corpus simulation, reference data and storage.
"""

from wealth_mngr.api.routes import reference, indexation, calculators, corpus, saved_calculations, preferences

__all__ = ["reference", "indexation", "calculators", "corpus", "saved_calculations", "preferences"]
