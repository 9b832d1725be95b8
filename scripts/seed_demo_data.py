"""
Seed demo data — one actor per workflow role + a handful of example tenders.

Usage:
    python scripts/seed_demo_data.py              # Uses development DB
    python scripts/seed_demo_data.py --env prod   # Uses production DB
    python scripts/seed_demo_data.py --no-tenders # Actors only

This script is idempotent — safe to run multiple times. Existing users are
left untouched; example tenders are only created when the tenders table is
empty.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tenderflow import create_app
from tenderflow.models import db
from tenderflow.models.auth import User
from tenderflow.models.tender import Tender
from tenderflow.services import tender_service, user_service


# ═══════════════════════════════════════════════════════════════
# ACTORS: (id, username, role, first_name, last_name, direction, division)
# ═══════════════════════════════════════════════════════════════
USERS = [
    ("admin1", "admin1", "ADMIN", "Admin", "Système", "DG", "DSI"),
    ("st1", "st1", "ST", "Karim", "Alaoui", "DT", "DIV-TECH"),
    ("sm1", "sm1", "SM", "Salma", "Bennani", "DAF", "DIV-MARCHES"),
    ("ce1", "ce1", "CE", "Youssef", "Tazi", "CE", "DIV-CONTROLE"),
    ("sb1", "sb1", "SB", "Nadia", "Idrissi", "DAF", "DIV-BUDGET"),
    ("sor1", "sor1", "SOR", "Omar", "Chraibi", "DAF", "DIV-ORDO"),
    ("tp1", "tp1", "TP", "Leila", "Fassi", "TGR", "DIV-TRESOR"),
    ("commission1", "commission1", "COMMISSION", "Commission", "AO", "DG", None),
    ("direction1", "direction1", "DIRECTION", "Direction", "Générale", "DG", None),
    ("prestataire1", "prestataire1", "PRESTATAIRE", "Prestataire", "Démo", None, None),
]

# (title, description, amount, workflow_code, approvals to apply after creation)
TENDERS = [
    ("Acquisition de matériel informatique", "Postes de travail et imprimantes", "850000.00", "standard", 0),
    ("Travaux d'aménagement des bureaux", "Rénovation du 2e étage", "1250000.00", "standard", 3),
    ("Prestations de nettoyage", "Marché annuel", "320000.00", "standard", 12),
    ("Contrôle qualité des produits alimentaires", "Prestation de contrôle et certification", "475000.00", "onssa", 4),
]


def seed_users():
    created = 0
    for user_id, username, role, first, last, direction, division in USERS:
        if db.session.get(User, user_id):
            continue
        user_service.create_user(
            username=username,
            role=role,
            email=f"{username}@tenderflow.ma",
            first_name=first,
            last_name=last,
            direction=direction,
            division=division,
            user_id=user_id,
        )
        created += 1
    print(f"  Users: {created} created, {len(USERS) - created} already existed")


def seed_tenders():
    if Tender.query.count():
        print("  Tenders: already present, skipping")
        return
    for title, description, amount, workflow_code, approvals in TENDERS:
        tender = tender_service.create_tender(
            title=title,
            description=description,
            amount=amount,
            metadata={"direction": "DAF", "division": "DIV-MARCHES"},
            created_by_id="st1",
            workflow_code=workflow_code,
        )
        for _ in range(approvals):
            actor = tender.current_actor_id or "admin1"
            tender = tender_service.approve(tender.id, actor, comments="Validé (démo)", with_remarks=False)
        print(f"  Tender {tender.reference}: {workflow_code} at {tender.current_phase}.{tender.current_step}")


def main():
    parser = argparse.ArgumentParser(description="Seed demo actors and example tenders")
    parser.add_argument("--env", default="development", help="App environment")
    parser.add_argument("--no-tenders", action="store_true", help="Only seed actors")
    args = parser.parse_args()

    env = "production" if args.env == "prod" else args.env
    app = create_app(env)

    with app.app_context():
        print("=" * 60)
        print("  SEED: Demo actors & tenders")
        print("=" * 60)

        print("\nSeeding actors...")
        seed_users()

        if not args.no_tenders:
            print("\nSeeding tenders...")
            seed_tenders()

        print("\n" + "=" * 60)
        print(f"  Users:   {User.query.count()}")
        print(f"  Tenders: {Tender.query.count()}")
        print("=" * 60)


if __name__ == "__main__":
    main()
