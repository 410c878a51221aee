# -*- coding: utf-8 -*-
"""
seed_reference.py: creates the tables and loads the reference data.

Modes:
- python seed_reference.py --create   → create MISSING tables and seed roles,
                                         emotions and article categories (idempotent)
- python seed_reference.py --reset    → drop every table, recreate and seed
                                         (WARNING: all data is lost)

Optional: --with-admin EMAIL PASSWORD creates a first ADMIN account.
Works with SQLite and PostgreSQL.
"""

import argparse
import logging

from extensions import db
from models import Role, RoleName

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    RoleName.ADMIN: "Administrateur de la plateforme",
    RoleName.PRACTITIONER: "Professionnel de santé assurant un suivi",
    RoleName.USER: "Utilisateur standard",
}

# Emotion wheel: category -> (description, emotions)
EMOTION_TAXONOMY = {
    "Joie": ("Émotions agréables liées au bien-être",
             ["Fierté", "Contentement", "Enchantement", "Excitation", "Émerveillement", "Gratitude"]),
    "Colère": ("Réaction face à une frustration ou une injustice",
               ["Frustration", "Irritation", "Rage", "Ressentiment", "Agacement", "Hostilité"]),
    "Peur": ("Réaction face à un danger réel ou perçu",
             ["Inquiétude", "Anxiété", "Terreur", "Appréhension", "Panique", "Crainte"]),
    "Tristesse": ("Réaction face à une perte ou une déception",
                  ["Chagrin", "Mélancolie", "Abattement", "Désespoir", "Solitude", "Déception"]),
    "Surprise": ("Réaction face à l'inattendu",
                 ["Étonnement", "Stupéfaction", "Sidération", "Incrédulité", "Confusion", "Ébahissement"]),
    "Dégoût": ("Rejet de ce qui est perçu comme déplaisant",
               ["Répulsion", "Déplaisir", "Nausée", "Dédain", "Horreur", "Dégoût profond"]),
}

ARTICLE_CATEGORIES = {
    "Santé mentale": "Comprendre et prendre soin de sa santé mentale",
    "Gestion du stress": "Techniques et conseils pour réduire le stress",
    "Méditation": "Exercices de respiration et de pleine conscience",
    "Sommeil": "Mieux dormir pour mieux vivre",
    "Bien-être au travail": "Équilibre entre vie professionnelle et personnelle",
}


def seed_roles() -> int:
    created = 0
    for role, description in ROLE_DESCRIPTIONS.items():
        if Role.query.filter_by(name=role.value).first() is None:
            db.session.add(Role(name=role.value, description=description))
            created += 1
    db.session.commit()
    return created


def seed_emotions() -> int:
    from modules.emotions.models import Emotion, EmotionCategory

    created = 0
    for category_name, (description, emotions) in EMOTION_TAXONOMY.items():
        category = EmotionCategory.query.filter_by(name=category_name).first()
        if category is None:
            category = EmotionCategory(name=category_name, description=description)
            db.session.add(category)
            db.session.flush()
        existing = {e.name for e in category.emotions}
        for name in emotions:
            if name not in existing:
                db.session.add(Emotion(name=name, category_id=category.id))
                created += 1
    db.session.commit()
    return created


def seed_article_categories() -> int:
    from modules.articles.models import ArticleCategory

    created = 0
    for name, description in ARTICLE_CATEGORIES.items():
        if ArticleCategory.query.filter_by(name=name).first() is None:
            db.session.add(ArticleCategory(name=name, description=description))
            created += 1
    db.session.commit()
    return created


def seed_all() -> dict:
    return {
        "roles": seed_roles(),
        "emotions": seed_emotions(),
        "article_categories": seed_article_categories(),
    }


def main():
    from app import create_app
    from create_user import create_user

    parser = argparse.ArgumentParser(description="Init CESIZen tables and reference data")
    grp = parser.add_mutually_exclusive_group(required=True)
    grp.add_argument("--create", action="store_true", help="create missing tables and seed (no deletion)")
    grp.add_argument("--reset", action="store_true", help="drop all tables, recreate and seed (data is lost)")
    parser.add_argument("--with-admin", nargs=2, metavar=("EMAIL", "PASSWORD"), help="also create an ADMIN account")

    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            logger.warning("Dropping all tables")
            db.drop_all()
        db.create_all()
        counts = seed_all()
        logger.info("Seeded %s", counts)
        if args.with_admin:
            email, password = args.with_admin
            create_user(email, password, RoleName.ADMIN, first_name="Admin", last_name="CESIZen")


if __name__ == "__main__":
    main()
