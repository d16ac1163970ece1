#!/usr/bin/env python
"""Script to run the task board API server."""
import os
import sys
from pathlib import Path

# Get the directory where this script is located
backend_dir = Path(__file__).resolve().parent

# Add backend directory to Python path
sys.path.insert(0, str(backend_dir))

# Change to backend directory
os.chdir(backend_dir)

# Now run uvicorn
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=True
    )
