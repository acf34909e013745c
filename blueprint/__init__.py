"""
Exam Blueprint Engine
blueprint/

Steps:
1. Weightage   — a distribution's share of the paper total
2. Builder     — create / update / delete blueprints from chapter distributions
3. Validator   — reconcile an authored paper against a blueprint
4. Approval    — DRAFT → APPROVED, then read-only
"""
