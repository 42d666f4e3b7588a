"""Seed a demo account with a published cheese questionnaire and catalog."""
import asyncio
import sys
sys.path.insert(0, ".")

from palate.database import session_scope
from palate.models import Account, Questionnaire
from palate.services.account_service import AccountService
from palate.services.product_service import ProductService
from palate.services.questionnaire_service import QuestionnaireService
from palate.store import SqlRecordStore


DEMO_ACCOUNT_ID = "demo-fromagerie"

DEMO_ACCOUNT = {
    "email": "demo@palate.local",
    "first_name": "Demo",
    "last_name": "Cheesemonger",
}

DEMO_BRANDING = {
    "company_name": "The Demo Fromagerie",
    "brand_color": "#D97706",
}

DEMO_QUESTIONNAIRE = {
    "title": "Find your cheese",
    "description": "Three quick questions and we'll point you at a wedge.",
}

DEMO_QUESTIONS = [
    {
        "text": "Which flavour profile sounds best?",
        "question_type": "multiple-choice",
        "options": ["Mild", "Nutty", "Sharp", "Earthy"],
    },
    {
        "text": "How adventurous are you feeling? (1-5)",
        "question_type": "rating",
    },
    {
        "text": "Tell us about the occasion.",
        "question_type": "text",
    },
]

DEMO_PRODUCTS = [
    {
        "name": "Aged Gouda",
        "description": "Crunchy crystals, caramel finish.",
        "tags": ["nutty", "aged", "sweet"],
    },
    {
        "name": "Cave Cheddar",
        "description": "Clothbound and sharp.",
        "tags": ["sharp", "aged", "crumbly"],
    },
    {
        "name": "Brie de Meaux",
        "description": "Soft-ripened, buttery.",
        "tags": ["mild", "creamy", "soft"],
    },
    {
        "name": "Truffle Pecorino",
        "description": "Sheep's milk with black truffle.",
        "tags": ["earthy", "salty", "party"],
    },
    {
        "name": "Fresh Mozzarella",
        "description": "Milky and delicate.",
        "tags": ["mild", "fresh"],
    },
]


async def seed():
    async with session_scope() as session:
        store = SqlRecordStore(session)
        accounts = AccountService(store)
        questionnaires = QuestionnaireService(store)
        products = ProductService(store)

        if await store.get(Account, DEMO_ACCOUNT_ID) is not None:
            print(f"  Account {DEMO_ACCOUNT_ID} already exists, skipping.")
            return

        await accounts.ensure_account(DEMO_ACCOUNT_ID, DEMO_ACCOUNT)
        await accounts.update_settings(DEMO_ACCOUNT_ID, DEMO_BRANDING)
        print(f"  Seeded account {DEMO_ACCOUNT_ID}")

        questionnaire: Questionnaire = await questionnaires.create(
            DEMO_ACCOUNT_ID,
            DEMO_QUESTIONNAIRE["title"],
            DEMO_QUESTIONNAIRE["description"],
        )
        for q in DEMO_QUESTIONS:
            await questionnaires.add_question(
                DEMO_ACCOUNT_ID,
                questionnaire.id,
                q["text"],
                q["question_type"],
                q.get("options"),
            )
        await questionnaires.set_published(DEMO_ACCOUNT_ID, questionnaire.id, True)
        print(f"  Seeded questionnaire {questionnaire.id} ({len(DEMO_QUESTIONS)} questions)")

        for p in DEMO_PRODUCTS:
            await products.create(
                DEMO_ACCOUNT_ID,
                p["name"],
                description=p["description"],
                tags=p["tags"],
            )
        print(f"  Seeded {len(DEMO_PRODUCTS)} products")

    print("Done seeding demo data.")


if __name__ == "__main__":
    asyncio.run(seed())
