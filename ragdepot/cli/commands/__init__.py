# ragdepot/cli/commands/__init__.py
