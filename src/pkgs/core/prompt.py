"""
Interactive confirmation prompt.
"""

from src.i18n import _


def ask_for_confirmation(prompt: str) -> bool:
    """Ask a yes/no question on the terminal; anything but 'y' means no."""
    try:
        response = input(f"{prompt} {_('(y/N)')}: ")
    except EOFError:
        return False
    return response.strip().lower() == "y"
