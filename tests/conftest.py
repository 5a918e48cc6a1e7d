"""Shared fixtures for skillmatrix tests.

``MATRIX_YAML`` is a small but complete matrix: an exclusive framework
category, the state-management scenario (three mutually exclusive members),
a non-exclusive data category with an any-of requirement, a setup/usage
pair, aliases, recommendations, alternatives and one suggested stack.
"""

from __future__ import annotations

import pathlib

import pytest

from skillmatrix.core.compiler import ResolvedIndex, compile_model
from skillmatrix.core.model import RelationshipModel, parse_model

MATRIX_YAML = """\
version: "1.0"
categories:
  framework:
    name: Framework
    description: UI framework
    required: true
    order: 1
  state:
    name: State Management
    order: 2
    members: [zustand, redux, mobx]
  data:
    name: Data Fetching
    exclusive: false
    order: 3
  testing:
    name: Testing
    exclusive: false
    order: 5
  testing-unit:
    name: Unit Testing
    parent: testing
    order: 1
  backend:
    name: Backend
    exclusive: false
    order: 4
skill_aliases:
  rq: react-query
  sb-setup: supabase-setup
skills:
  react:
    category: framework
    description: React web framework
  react-native:
    name: React Native
    category: framework
  vue:
    category: framework
  zustand:
    name: Zustand
  redux:
    name: Redux
  mobx:
    name: MobX
  react-query:
    name: React Query
    category: data
  swr:
    name: SWR
    category: data
  vitest:
    name: Vitest
    category: testing-unit
  jest:
    name: Jest
    category: testing-unit
  supabase-setup:
    name: Supabase Setup
    category: backend
    provides_setup_for: [supabase-auth]
  supabase-auth:
    name: Supabase Auth
    category: backend
relationships:
  conflicts:
    - skills: [react-query, swr]
      reason: Both manage the server cache
  discourages:
    - skills: [redux, rq]
      reason: RTK Query overlaps with React Query
  requires:
    - skill: rq
      needs: [react, react-native]
      needs_any: true
      reason: React Query hooks need React
    - skill: supabase-auth
      needs: [sb-setup]
  recommends:
    - when: react
      suggest:
        - zustand
        - skill: vitest
          strength: strong
      reason: Pairs well with React
    - when: react-query
      suggest: [zustand]
  alternatives:
    - purpose: Server state caching
      skills: [react-query, swr]
suggested_stacks:
  - id: react-starter
    name: React Starter
    audience: [beginners]
    skills:
      frontend:
        framework: react
        state: zustand
      data:
        fetching: rq
"""


@pytest.fixture
def matrix_text() -> str:
    """The shared matrix document as text."""
    return MATRIX_YAML


@pytest.fixture
def matrix_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the shared matrix document to a temporary file."""
    path = tmp_path / "skills-matrix.yaml"
    path.write_text(MATRIX_YAML, encoding="utf-8")
    return path


@pytest.fixture
def model() -> RelationshipModel:
    """The shared matrix parsed into a relationship model."""
    return parse_model(MATRIX_YAML)


@pytest.fixture
def index(model: RelationshipModel) -> ResolvedIndex:
    """The shared matrix compiled into a resolved index."""
    return compile_model(model)
