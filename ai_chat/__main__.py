"""Main entry point for running ai-chat as a module.

This allows running with: python -m ai_chat
"""

from ai_chat.app import main_cli_runner

if __name__ == "__main__":
    main_cli_runner()
