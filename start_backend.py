#!/usr/bin/env python3
"""
Startup script for the Document → JSON backend
"""

import os
import sys

from common.mailer import MailSettings
from extraction.config import config
from app import app


def print_config():
    """Show the effective configuration (never any secrets)."""
    ai = config.get_ai_config()
    print("=== PROCESSING CONFIGURATION ===")
    print(f"OpenAI model:    {ai['openai']['model']} (splits above {ai['openai']['chunk_size']} chars)")
    print(f"Anthropic model: {ai['anthropic']['model']}")
    print(f"Gemini model:    {ai['gemini']['model']}")
    print(f"Upload window:   {config.chunk_size} chars (+{config.chunk_lookahead} lookahead)")
    print(f"Max upload:      {config.max_file_size // (1024 * 1024)} MB")
    print(f"AI timeout:      {config.ai_timeout}s")
    print("================================")


def check_mail():
    """Warn when the contact form cannot send mail."""
    try:
        missing = MailSettings().missing()
    except Exception as e:
        print(f"❌ Invalid SMTP settings: {e}")
        return False
    if missing:
        print(f"⚠️  Contact form disabled, missing: {', '.join(missing)}")
        return False
    print("✅ SMTP relay configured")
    return True


def main():
    print("🚀 Starting Document → JSON Backend...")
    print("=" * 50)
    print_config()
    check_mail()

    port = int(os.getenv("PORT", "8000"))
    print("\n" + "=" * 50)
    print("🌐 Starting Flask server...")
    print(f"📖 Health check: http://localhost:{port}/health")
    print("=" * 50)

    try:
        app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG") == "1")
    except KeyboardInterrupt:
        print("\n🛑 Server stopped by user.")
    except Exception as e:
        print(f"\n❌ Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
