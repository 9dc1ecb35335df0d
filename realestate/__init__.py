"""
FastAPI backend for a real-estate inventory: floors, apartments, buyers,
pictures and users on Firestore, with binary assets in Cloud Storage.
"""
