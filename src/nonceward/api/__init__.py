# Web integration for nonceward (FastAPI).
