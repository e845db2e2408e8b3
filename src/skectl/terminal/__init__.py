"""Terminal prompts for usernames and masked passwords."""

from skectl.terminal.input import LineReader, SecureLineReader, raw_terminal

__all__ = ["LineReader", "SecureLineReader", "raw_terminal"]
