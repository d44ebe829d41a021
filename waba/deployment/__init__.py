"""waba/deployment — HTTP serving for the extension engine.

The FastAPI app lives in ``waba.deployment.server.app`` and needs the
``server`` extra (fastapi, uvicorn).
"""
