# ragdepot/ingestion/__init__.py
