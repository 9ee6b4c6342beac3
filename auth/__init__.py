"""auth/ -- Authentication package for the classifieds API.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or ads/.
api/ imports from auth/, not the other way around.
"""
