"""Compiler: turn the authored model into a frozen, skill-centric index.

The package is split into focused submodules:

- ``resolved``: the ``ResolvedIndex`` and per-skill ``ResolvedSkill`` types.
- ``compiler``: ``compile_model`` and ``compile_path`` (the merge step).
- ``cache``: JSON serialization and the digest-checked on-disk cache.

All public names are re-exported here.
"""

from skillmatrix.core.compiler.resolved import (
    ConflictOrigin,
    ConflictRelation,
    Recommendation,
    ResolvedIndex,
    ResolvedSkill,
    ResolvedStack,
    SkillAlternative,
    SkillRelation,
    SkillRequirement,
)
from skillmatrix.core.compiler.compiler import compile_model, compile_path

# Attach serialization to ResolvedIndex as methods/classmethods
from skillmatrix.core.compiler import cache as _cache
from skillmatrix.core.compiler.cache import load_index

ResolvedIndex.to_dict = _cache._to_dict
ResolvedIndex.to_json = _cache._to_json
ResolvedIndex.write = _cache._write
ResolvedIndex.from_dict = classmethod(_cache._from_dict)
ResolvedIndex.from_json = classmethod(_cache._from_json)
ResolvedIndex.read = classmethod(_cache._read)

__all__ = [
    "ConflictOrigin",
    "ConflictRelation",
    "Recommendation",
    "ResolvedIndex",
    "ResolvedSkill",
    "ResolvedStack",
    "SkillAlternative",
    "SkillRelation",
    "SkillRequirement",
    "compile_model",
    "compile_path",
    "load_index",
]
