"""
Palate — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from palate.models.account import Account
from palate.models.product import Product
from palate.models.questionnaire import Question, Questionnaire, Response

__all__ = [
    "Account",
    "Questionnaire",
    "Question",
    "Product",
    "Response",
]
