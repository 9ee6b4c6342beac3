"""ads/ -- Classified listings: domain model, persistence, and service.

Layer rule: ads/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/ -- the owner id arrives as a plain int
already verified by the token gate.
"""
