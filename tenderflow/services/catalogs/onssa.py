"""
ONSSA tender workflow — ten-phase variant with remark loops.

Steps are numbered densely inside each phase. Review steps branch on remarks:

    review ──remarks──▶ log remarks ──▶ update ──┐
      ▲                                          │
      └──────────────────────────────────────────┘
    review ──clean──▶ validate / next stage

The loop is encoded with override targets only:
  - review step:  on_remarks_target = log remarks, on_approve_target = exit step
  - update step:  on_approve_target = review step (loop back)
"""

WORKFLOW_CODE = "onssa"
WORKFLOW_NAME = "Appel d'offres — ONSSA"

PHASE_NAMES = {
    1: "Création du DAO",
    2: "Revue CE",
    3: "Commission et contrat",
    4: "Approbation et engagement",
    5: "Dossier de paiement",
    6: "Ordre de paiement",
    7: "Ordre de service",
    8: "Suspension / reprise",
    9: "Réception",
    10: "Facturation et clôture",
}


STEPS = [
    # ── Phase 1 ──────────────────────────────────────────────────────────
    {"phase": 1, "step_number": 1, "title": "ST: Create DAO", "description": "Service Technique creates Dossier d'Appel d'Offres", "responsible_role": "ST", "estimated_duration": 3, "max_duration": 5},
    {"phase": 1, "step_number": 2, "title": "SM: Receive DAO", "description": "Service Marchés receives the DAO from ST", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2},

    # ── Phase 2: CE review loop ──────────────────────────────────────────
    {"phase": 2, "step_number": 1, "title": "SM: Forward DAO to CE", "description": "Service Marchés forwards DAO to Contrôle d'État", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},
    {"phase": 2, "step_number": 2, "title": "CE: Review DAO", "description": "Contrôle d'État reviews the DAO for compliance", "responsible_role": "CE", "estimated_duration": 3, "max_duration": 5,
     "on_remarks_target": (2, 3), "on_approve_target": (2, 5)},
    {"phase": 2, "step_number": 3, "title": "CE: Log remarks", "description": "CE logs remarks if any issues found", "responsible_role": "CE", "estimated_duration": 1, "max_duration": 2, "is_internal": True},
    {"phase": 2, "step_number": 4, "title": "SM: Update DAO", "description": "SM updates DAO based on CE remarks", "responsible_role": "SM", "estimated_duration": 2, "max_duration": 3,
     "on_approve_target": (2, 2)},
    {"phase": 2, "step_number": 5, "title": "CE: Validate DAO", "description": "CE validates the updated DAO", "responsible_role": "CE", "estimated_duration": 2, "max_duration": 3},
    {"phase": 2, "step_number": 6, "title": "SM: Submit to Commission", "description": "SM submits validated DAO to Commission", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},

    # ── Phase 3 ──────────────────────────────────────────────────────────
    {"phase": 3, "step_number": 1, "title": "SM: Transmit to Commission", "description": "SM transmits tender to Commission for bidding process", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2},
    {"phase": 3, "step_number": 2, "title": "Commission: Manage bidding", "description": "Commission manages the bidding process", "responsible_role": "COMMISSION", "estimated_duration": 15, "max_duration": 30},
    {"phase": 3, "step_number": 3, "title": "Commission: Select Prestataire", "description": "Commission selects the winning contractor", "responsible_role": "COMMISSION", "estimated_duration": 3, "max_duration": 5},
    {"phase": 3, "step_number": 4, "title": "SM: Draft contract", "description": "SM drafts the contract with selected prestataire", "responsible_role": "SM", "estimated_duration": 3, "max_duration": 5},
    {"phase": 3, "step_number": 5, "title": "Direction: Sign contract", "description": "Direction signs the contract", "responsible_role": "DIRECTION", "estimated_duration": 2, "max_duration": 3},
    {"phase": 3, "step_number": 6, "title": "SM: Inform Prestataire", "description": "SM informs prestataire of contract signature", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},

    # ── Phase 4 ──────────────────────────────────────────────────────────
    {"phase": 4, "step_number": 1, "title": "SM: Transmit to Prestataire", "description": "SM transmits contract to prestataire for approval", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2},
    {"phase": 4, "step_number": 2, "title": "Prestataire: Approve contract", "description": "Prestataire approves the contract terms", "responsible_role": "PRESTATAIRE", "estimated_duration": 5, "max_duration": 10},
    {"phase": 4, "step_number": 3, "title": "SB: Engage contract", "description": "Service Budgétaire engages the contract financially", "responsible_role": "SB", "estimated_duration": 2, "max_duration": 3},

    # ── Phase 5: SOR review loop ─────────────────────────────────────────
    {"phase": 5, "step_number": 1, "title": "SM: Prepare payment dossier", "description": "SM prepares the payment dossier", "responsible_role": "SM", "estimated_duration": 2, "max_duration": 3},
    {"phase": 5, "step_number": 2, "title": "SM: Transmit to SOR", "description": "SM transmits payment dossier to Service Ordonnancement", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},
    {"phase": 5, "step_number": 3, "title": "SOR: Review dossier", "description": "SOR reviews the payment dossier", "responsible_role": "SOR", "estimated_duration": 2, "max_duration": 4,
     "on_remarks_target": (5, 4), "on_approve_target": (5, 6)},
    {"phase": 5, "step_number": 4, "title": "SOR: Log remarks", "description": "SOR logs remarks if issues found", "responsible_role": "SOR", "estimated_duration": 1, "max_duration": 2, "is_internal": True},
    {"phase": 5, "step_number": 5, "title": "SM: Update dossier", "description": "SM updates dossier based on SOR remarks", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2,
     "on_approve_target": (5, 3)},
    {"phase": 5, "step_number": 6, "title": "SOR: Establish OP/OV", "description": "SOR establishes Ordre de Paiement/Ordre de Virement", "responsible_role": "SOR", "estimated_duration": 1, "max_duration": 2},

    # ── Phase 6: TP review loop ──────────────────────────────────────────
    {"phase": 6, "step_number": 1, "title": "SOR: Transmit OP/OV to TP", "description": "SOR transmits OP/OV to Trésorier Payeur", "responsible_role": "SOR", "estimated_duration": 1, "max_duration": 1},
    {"phase": 6, "step_number": 2, "title": "TP: Review OP/OV", "description": "TP reviews the payment order", "responsible_role": "TP", "estimated_duration": 2, "max_duration": 3,
     "on_remarks_target": (6, 3), "on_approve_target": (6, 5)},
    {"phase": 6, "step_number": 3, "title": "TP: Log remarks", "description": "TP logs remarks if issues found", "responsible_role": "TP", "estimated_duration": 1, "max_duration": 1, "is_internal": True},
    {"phase": 6, "step_number": 4, "title": "SM: Update via SOR", "description": "SM updates payment order via SOR", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2,
     "on_approve_target": (6, 2)},
    {"phase": 6, "step_number": 5, "title": "TP: Validate and sign", "description": "TP validates and signs the payment order", "responsible_role": "TP", "estimated_duration": 1, "max_duration": 2},
    {"phase": 6, "step_number": 6, "title": "SM: Add ordonnateur signature", "description": "SM adds ordonnateur signature to complete payment", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},

    # ── Phase 7 ──────────────────────────────────────────────────────────
    {"phase": 7, "step_number": 1, "title": "SM: Notify ST of OS activation", "description": "SM notifies ST of Ordre de Service activation", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},
    {"phase": 7, "step_number": 2, "title": "ST: Monitor project kickoff", "description": "ST monitors the project kickoff and execution", "responsible_role": "ST", "estimated_duration": 2, "max_duration": 3},

    # ── Phase 8 ──────────────────────────────────────────────────────────
    {"phase": 8, "step_number": 1, "title": "ST: Request suspension/resume", "description": "ST requests suspension or resumption of services", "responsible_role": "ST", "estimated_duration": 1, "max_duration": 2},
    {"phase": 8, "step_number": 2, "title": "SM: Transmit to Prestataire", "description": "SM transmits suspension/resume order to prestataire", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},

    # ── Phase 9: reception loop ──────────────────────────────────────────
    {"phase": 9, "step_number": 1, "title": "SM: Designate reception commission", "description": "SM designates the reception commission", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2},
    {"phase": 9, "step_number": 2, "title": "SM: Log deliverables", "description": "SM logs the deliverables received", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 2},
    {"phase": 9, "step_number": 3, "title": "ST: Review deliverables", "description": "ST reviews the deliverables for compliance", "responsible_role": "ST", "estimated_duration": 3, "max_duration": 5,
     "on_remarks_target": (9, 4), "on_approve_target": (9, 6)},
    {"phase": 9, "step_number": 4, "title": "ST: Log remarks", "description": "ST logs remarks if deliverables need corrections", "responsible_role": "ST", "estimated_duration": 1, "max_duration": 2, "is_internal": True},
    {"phase": 9, "step_number": 5, "title": "Prestataire: Address remarks", "description": "Prestataire addresses the remarks and corrections", "responsible_role": "PRESTATAIRE", "estimated_duration": 5, "max_duration": 10,
     "on_approve_target": (9, 3)},
    {"phase": 9, "step_number": 6, "title": "ST: Finalize reception", "description": "ST finalizes the reception of deliverables", "responsible_role": "ST", "estimated_duration": 2, "max_duration": 3},

    # ── Phase 10 ─────────────────────────────────────────────────────────
    {"phase": 10, "step_number": 1, "title": "Prestataire: Submit invoice", "description": "Prestataire submits invoice for payment", "responsible_role": "PRESTATAIRE", "estimated_duration": 3, "max_duration": 5},
    {"phase": 10, "step_number": 2, "title": "ST: Certify invoice", "description": "ST certifies the invoice for payment", "responsible_role": "ST", "estimated_duration": 2, "max_duration": 3},
    {"phase": 10, "step_number": 3, "title": "ST: Establish note de calcul", "description": "ST establishes calculation note for payment", "responsible_role": "ST", "estimated_duration": 1, "max_duration": 2},
    {"phase": 10, "step_number": 4, "title": "SM: Notify Prestataire", "description": "SM notifies prestataire of payment processing", "responsible_role": "SM", "estimated_duration": 1, "max_duration": 1},
    {"phase": 10, "step_number": 5, "title": "SM: Receive definitive deposit", "description": "SM receives definitive deposit/guarantee", "responsible_role": "SM", "estimated_duration": 2, "max_duration": 3},
    {"phase": 10, "step_number": 6, "title": "SB: Confirm financial closure", "description": "SB confirms financial closure of the contract", "responsible_role": "SB", "estimated_duration": 2, "max_duration": 3},
]
