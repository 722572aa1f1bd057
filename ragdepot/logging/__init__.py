# ragdepot/logging/__init__.py
