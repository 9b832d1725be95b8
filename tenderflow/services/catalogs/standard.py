"""
Standard tender workflow — reference catalog.

Three phases, linear, no conditional branches:
  Phase 1 — Préparation et passation du marché   (23 steps)
  Phase 2 — Exécution des prestations             (19 steps)
  Phase 3 — Paiement                              (17 steps)

Durations are in days. Phases 2 and 3 carry no estimates; the engine falls
back to DEFAULT_STEP_DEADLINE_DAYS for those steps.
"""

WORKFLOW_CODE = "standard"
WORKFLOW_NAME = "Appel d'offres — procédure standard"

PHASE_NAMES = {
    1: "Préparation",
    2: "Exécution",
    3: "Paiement",
}

# ═════════════════════════════════════════════════════════════════════════════
# PHASE 1: PRÉPARATION
# ═════════════════════════════════════════════════════════════════════════════

_PHASE_1 = [
    {"step_number": 1, "title": "Envoi du DAO", "description": "ST → SM: Élaboration du Dossier d'Appel d'Offres", "responsible_role": "SM", "estimated_duration": 5, "max_duration": 10},
    {"step_number": 2, "title": "Étude et Envoi au CE", "description": "SM → CE: Examen du dossier et vérification de conformité", "responsible_role": "CE", "estimated_duration": 7, "max_duration": 14},
    {"step_number": 3, "title": "Revue par CE", "description": "CE: Examen de conformité réglementaire", "responsible_role": "CE", "estimated_duration": 3, "max_duration": 7, "is_internal": True},
    {"step_number": 4, "title": "Transmission des remarques CE", "description": "CE → ST: Formulation des observations", "responsible_role": "ST", "estimated_duration": 2, "max_duration": 5},
    {"step_number": 5, "title": "Satisfaction des remarques CE", "description": "ST → SM: Corrections et modifications", "responsible_role": "SM", "estimated_duration": 3, "max_duration": 7},
    {"step_number": 6, "title": "Vérification et Envoi au CE", "description": "SM → CE: Vérification des corrections", "responsible_role": "CE", "estimated_duration": 2, "max_duration": 5},
    {"step_number": 7, "title": "Validation par CE", "description": "CE → SM: Accord définitif", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 3},
    {"step_number": 8, "title": "Transmission à la commission d'AO", "description": "SM → ST: Information de validation", "responsible_role": "ST", "estimated_duration": 1, "max_duration": 2},
    {"step_number": 9, "title": "Signature du DAO", "description": "SM: Signature par l'autorité compétente", "responsible_role": "SM", "estimated_duration": 2, "max_duration": 5, "is_internal": True},
    {"step_number": 10, "title": "Projet AO publié", "description": "SM: Publication de l'avis", "responsible_role": "SM", "estimated_duration": 30, "max_duration": 45, "is_internal": True},
    {"step_number": 11, "title": "Ouverture des plis", "description": "SM: Réception et ouverture des offres", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2, "is_internal": True},
    {"step_number": 12, "title": "Jugement Définitif", "description": "SM: Évaluation et désignation de l'attributaire", "responsible_role": "SM", "estimated_duration": 15, "max_duration": 30, "is_internal": True},
    {"step_number": 13, "title": "Information de l'attributaire", "description": "SM → CE: Notification de l'entreprise retenue", "responsible_role": "CE", "estimated_duration": 1, "max_duration": 3},
    {"step_number": 14, "title": "Établissement du Marché", "description": "CE → ST: Demande d'établissement du contrat", "responsible_role": "ST", "estimated_duration": 5, "max_duration": 10},
    {"step_number": 15, "title": "Signature du Marché par la Direction Technique", "description": "ST → SM: Signature et retour", "responsible_role": "SM", "estimated_duration": 3, "max_duration": 7},
    {"step_number": 16, "title": "Remise du Marché au Prestataire", "description": "SM: Remise officielle du marché", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 3, "is_internal": True},
    {"step_number": 17, "title": "Transmission du Marché pour Engagement", "description": "SM → SB: Transmission pour engagement", "responsible_role": "SB", "estimated_duration": 1, "max_duration": 2},
    {"step_number": 18, "title": "Engagement du Marché", "description": "SB → SM: Engagement budgétaire", "responsible_role": "SM", "estimated_duration": 2, "max_duration": 5},
    {"step_number": 19, "title": "Approbation du Marché", "description": "SM: Approbation finale", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 3, "is_internal": True},
    {"step_number": 20, "title": "Visa du Marché", "description": "SM: Apposition du visa", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2, "is_internal": True},
    {"step_number": 21, "title": "Notification de l'approbation du marché au titulaire", "description": "SM → CE: Information d'approbation", "responsible_role": "CE", "estimated_duration": 1, "max_duration": 3},
    {"step_number": 22, "title": "Dépôt de la caution définitive", "description": "CE → SM: Confirmation de garantie", "responsible_role": "SM", "estimated_duration": 7, "max_duration": 14},
    {"step_number": 23, "title": "Élaboration de l'Ordre de Service", "description": "SM → CE: Préparation ordre de commencement", "responsible_role": "CE", "estimated_duration": 2, "max_duration": 5},
]

# ═════════════════════════════════════════════════════════════════════════════
# PHASE 2: EXÉCUTION
# ═════════════════════════════════════════════════════════════════════════════

_PHASE_2 = [
    {"step_number": 1, "title": "Information de la notification OS", "description": "SM → ST: Information émission ordre de service", "responsible_role": "ST"},
    {"step_number": 2, "title": "Demande de suspendre l'exécution des prestations", "description": "ST → SM: Demande d'arrêt temporaire", "responsible_role": "SM"},
    {"step_number": 3, "title": "Transmission de l'Ordre d'arrêt", "description": "SM: Notification d'arrêt au prestataire", "responsible_role": "SM", "is_internal": True},
    {"step_number": 4, "title": "Confirmation de l'Ordre d'arrêt", "description": "SM → ST: Confirmation transmission", "responsible_role": "ST"},
    {"step_number": 5, "title": "Transmission de l'Ordre de reprise", "description": "SM: Notification reprise au prestataire", "responsible_role": "SM", "is_internal": True},
    {"step_number": 6, "title": "Confirmation de l'Ordre de reprise", "description": "SM → ST: Information reprise", "responsible_role": "ST"},
    {"step_number": 7, "title": "Désignation de commission de réception", "description": "ST → SM: Constitution commission", "responsible_role": "SM"},
    {"step_number": 8, "title": "Réception des prestations", "description": "ST → SM: Réception et PV", "responsible_role": "SM"},
    {"step_number": 9, "title": "Constatation des manquements", "description": "SM: Notification défauts au prestataire", "responsible_role": "SM", "is_internal": True},
    {"step_number": 10, "title": "Satisfaction des remarques", "description": "Prestataire → SM: Corrections", "responsible_role": "SM"},
    {"step_number": 11, "title": "Demande de Saisir le prestataire pour satisfaire les remarques", "description": "SM → ST: Demande intervention", "responsible_role": "ST"},
    {"step_number": 12, "title": "Saisir le prestataire pour Constatation des manquements", "description": "ST: Contact prestataire", "responsible_role": "ST", "is_internal": True},
    {"step_number": 13, "title": "Élaboration de la lettre de Mise en Demeure", "description": "SM: Rédaction mise en demeure", "responsible_role": "SM", "is_internal": True},
    {"step_number": 14, "title": "Répondre à la lettre de Mise en Demeure", "description": "Prestataire → SM: Réponse planning", "responsible_role": "SM"},
    {"step_number": 15, "title": "Demande de résiliation", "description": "ST → SM: Demande résiliation", "responsible_role": "SM"},
    {"step_number": 16, "title": "Dépôt de Facture", "description": "Prestataire → SM: Soumission factures", "responsible_role": "SM"},
    {"step_number": 17, "title": "Établissement de la note de calcul / Décompte Provisoire", "description": "SM → ST: Décompte et vérification", "responsible_role": "ST"},
    {"step_number": 18, "title": "Certification des Facture", "description": "ST → SM: Certification conformité", "responsible_role": "SM"},
    {"step_number": 19, "title": "Réception Définitive", "description": "ST → SM: Réception définitive", "responsible_role": "SM"},
]

# ═════════════════════════════════════════════════════════════════════════════
# PHASE 3: PAIEMENT
# ═════════════════════════════════════════════════════════════════════════════

_PHASE_3 = [
    {"step_number": 1, "title": "Transmission du Dossier de paiement", "description": "SM → SOR: Transmission dossier complet", "responsible_role": "SOR"},
    {"step_number": 2, "title": "Examen du Dossier de paiement", "description": "SOR: Vérification conformité", "responsible_role": "SOR", "is_internal": True},
    {"step_number": 3, "title": "Retour du Dossier de paiement", "description": "SOR → SM: Retour avec observations", "responsible_role": "SM"},
    {"step_number": 4, "title": "Transmission des remarques SOR", "description": "SOR → ST: Remarques techniques", "responsible_role": "ST"},
    {"step_number": 5, "title": "Satisfaction des remarques SOR", "description": "ST → SM: Corrections", "responsible_role": "SM"},
    {"step_number": 6, "title": "Satisfaction des Rejets SOR", "description": "SM → SOR: Correction rejets", "responsible_role": "SOR"},
    {"step_number": 7, "title": "Vérification du Dossier de paiement", "description": "SOR: Vérification finale", "responsible_role": "SOR", "is_internal": True},
    {"step_number": 8, "title": "Établissement OP/OV", "description": "SOR: Ordre de Paiement/Virement", "responsible_role": "SOR", "is_internal": True},
    {"step_number": 9, "title": "Transmission du Dossier de paiement", "description": "SOR → TP: Transmission au Trésorier", "responsible_role": "TP"},
    {"step_number": 10, "title": "Rejet du Dossier de Paiement par le TP", "description": "TP → SOR: Rejet si irrégularités", "responsible_role": "SOR"},
    {"step_number": 11, "title": "Retour du Dossier de paiement par le TP", "description": "SOR → SM: Retour dossier rejeté", "responsible_role": "SM"},
    {"step_number": 12, "title": "Transmission des remarques TP", "description": "TP → ST: Observations", "responsible_role": "ST"},
    {"step_number": 13, "title": "Satisfaction des remarques TP", "description": "ST → SM: Corrections Trésorier", "responsible_role": "SM"},
    {"step_number": 14, "title": "Satisfaction des Rejets TP", "description": "SM → SOR: Correction rejets", "responsible_role": "SOR"},
    {"step_number": 15, "title": "Validation du Dossier de paiement", "description": "SOR: Validation définitive", "responsible_role": "SOR", "is_internal": True},
    {"step_number": 16, "title": "Signature du Dossier de Paiement par l'Ordonnateur", "description": "SOR → TP: Signature autorisation", "responsible_role": "TP"},
    {"step_number": 17, "title": "Signature du Dossier de Paiement par le TP", "description": "TP: Visa et paiement effectif", "responsible_role": "TP", "is_internal": True},
]


STEPS = (
    [{"phase": 1, **row} for row in _PHASE_1]
    + [{"phase": 2, **row} for row in _PHASE_2]
    + [{"phase": 3, **row} for row in _PHASE_3]
)
