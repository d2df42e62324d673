#!/usr/bin/env python3
"""
Run the Command Center Feed API.
Set OPENAI_API_KEY in environment (or .env) to enable advisory analysis; otherwise only
the simulated feed and rule-based predictions are served.
"""
import os

from dotenv import load_dotenv
import uvicorn

load_dotenv()


def main():
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=port,
        reload=os.environ.get("RELOAD", "0") == "1",
    )


if __name__ == "__main__":
    main()
