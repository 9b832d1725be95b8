"""
Built-in workflow catalog definitions.

Each module exposes WORKFLOW_CODE, WORKFLOW_NAME, PHASE_NAMES and STEPS
(a list of plain dicts, one per step). ``bootstrap_catalogs`` seeds and loads
every entry of BUILTIN_CATALOGS.
"""

from tenderflow.services.catalogs import onssa, standard

BUILTIN_CATALOGS = {
    standard.WORKFLOW_CODE: standard,
    onssa.WORKFLOW_CODE: onssa,
}
