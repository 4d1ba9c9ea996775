#!/usr/bin/env python3
"""
Run the car wash tracker API with uvicorn.
"""
import os
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "backend.fastapi.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENV_MODE", "dev") == "dev",
        log_level="info"
    )
