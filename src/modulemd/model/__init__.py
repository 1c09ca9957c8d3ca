"""Object model for modulemd documents.

Public API
----------
>>> from modulemd.model import new_module_stream, Dependencies
>>> stream = new_module_stream(2, "foo", "latest")
>>> deps = Dependencies()
>>> deps.add_runtime_stream("platform", "f30")
>>> stream.add_dependencies(deps)
>>> stream.depends_on_stream("platform", "f30")
True
"""

from .buildorder import validate_buildorder
from .components import Component, ComponentModule, ComponentRpm
from .defaults import Defaults, DefaultsV1
from .dependencies import Dependencies
from .identity import identity_key, nsvc, nsvca
from .profile import BuildOpts, Profile, RpmMapEntry, ServiceLevel
from .stream import ModuleStream, ModuleStreamV1, ModuleStreamV2, new_module_stream
from .translation import Translation, TranslationEntry

__all__ = [
    "BuildOpts",
    "Component",
    "ComponentModule",
    "ComponentRpm",
    "Defaults",
    "DefaultsV1",
    "Dependencies",
    "ModuleStream",
    "ModuleStreamV1",
    "ModuleStreamV2",
    "Profile",
    "RpmMapEntry",
    "ServiceLevel",
    "Translation",
    "TranslationEntry",
    "identity_key",
    "new_module_stream",
    "nsvc",
    "nsvca",
    "validate_buildorder",
]
