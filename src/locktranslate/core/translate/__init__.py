"""Lockfile translation: import records, first-party links and policy.

Submodules:

- ``policy``: ``TranslationPolicy`` and policy file loading.
- ``imports``: ``ImportRecord`` generation for registry packages.
- ``links``: ``FirstPartyLink`` resolution for workspace packages.
- ``translation``: the ``translate`` pipeline and manifest output.
"""

from locktranslate.core.translate.imports import (
    ImportRecord,
    direct_dependents,
    generate_import_records,
)
from locktranslate.core.translate.links import (
    FirstPartyLink,
    link_key,
    resolve_first_party_links,
)
from locktranslate.core.translate.policy import (
    POLICY_PATH_ENV_VAR,
    TranslationPolicy,
    load_policy,
    resolve_policy_path,
)
from locktranslate.core.translate.translation import (
    Translation,
    translate,
    translate_file,
)

__all__ = [
    "POLICY_PATH_ENV_VAR",
    "FirstPartyLink",
    "ImportRecord",
    "Translation",
    "TranslationPolicy",
    "direct_dependents",
    "generate_import_records",
    "link_key",
    "load_policy",
    "resolve_first_party_links",
    "resolve_policy_path",
    "translate",
    "translate_file",
]
