from typing import Optional

from .engine import AdaptiveQuiz

OPTION_KEYS = ["1", "2", "3", "4"]
SUBMIT_KEY = "Enter"


class KeyboardAdapter:
    """Translates key presses into quiz commands.

    Digits pick an option, Enter submits, and pressing the digit of the
    option that is already picked submits it as well.
    """

    def __init__(self, quiz: AdaptiveQuiz):
        self.quiz = quiz

    def handle_key(self, key: str) -> Optional[str]:
        """Return the name of the command that was accepted, if any."""
        if key == SUBMIT_KEY:
            return "submit" if self.quiz.submit() else None

        if key in OPTION_KEYS:
            index = OPTION_KEYS.index(key)
            if self.quiz.selected_option == index:
                return "submit" if self.quiz.submit() else None
            return "select" if self.quiz.select_option(index) else None

        return None
