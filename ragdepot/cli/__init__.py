# ragdepot/cli/__init__.py
