#!/usr/bin/env python3
"""Helper script to check the .env file and the chat-completions configuration."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Chat-completions provider (optional; travel insights and route chat need it)
KWIK_GROQ_API_KEY=your-groq-api-key-here
# KWIK_GROQ_MODEL=llama-3.3-70b-versatile

# API Configuration
KWIK_API_PREFIX=/api
KWIK_LOG_LEVEL=INFO
# KWIK_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list
# KWIK_FRONTEND_ALLOWED_ORIGINS=http://localhost:3000,http://127.0.0.1:3000

# Optimizer
KWIK_MAX_WAYPOINTS=300
KWIK_TWO_OPT_WRAP_BOUNDARY=true
"""


def _mask(value: str) -> str:
    return value[:6] + "..." + value[-4:] if len(value) > 12 else "***"


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("KwikMaps Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Edit .env and add your KWIK_GROQ_API_KEY to enable travel insights.")
        return 0

    print(f"✅ Found .env file at: {env_file}")
    env_key = os.getenv("KWIK_GROQ_API_KEY")
    if env_key:
        print(f"✅ KWIK_GROQ_API_KEY (from environment): {_mask(env_key)}")
    print()

    print("Testing config loading...")
    try:
        sys.path.insert(0, str(project_root / "src"))
        from kwikmaps.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    print(f"   API prefix: {settings.api_prefix}")
    print(f"   Max waypoints: {settings.max_waypoints}")
    print(f"   2-opt boundary: {'wrap' if settings.two_opt_wrap_boundary else 'open'}")
    if settings.groq_api_key:
        print(f"✅ Chat-completions configured (model {settings.groq_model}, key {_mask(settings.groq_api_key)})")
    else:
        print("❌ KWIK_GROQ_API_KEY is not set; optimize responses will carry a fallback insights message")
    return 0


if __name__ == "__main__":
    sys.exit(main())
