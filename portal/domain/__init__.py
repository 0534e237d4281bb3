"""
portal.domain: Portal-owned value types and enumerations.

Backend entities (businesses, intakes, share requests, ...) stay plain
dicts; only what the portal itself creates is modelled here. Nothing in here
imports from other portal sub-packages.
"""
