"""FastAPI backend: app factory, routers and request/response models."""
