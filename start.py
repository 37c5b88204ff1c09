#!/usr/bin/env python3
"""
Startup script for the trial balance validation backend
"""

import uvicorn
import os

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print("🚀 Starting Trial Balance Validation Backend...")
    print(f"🌐 API will be available at: http://localhost:{port}")
    print(f"📖 API Documentation: http://localhost:{port}/docs")
    print("=" * 50)
    
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("RELOAD", "true").lower() == "true",
        log_level="info"
    )
