#!/usr/bin/env python3
"""
Lyric Buddy
Interactive songwriting assistant: asks for a lyric idea and a style,
sends them to ChatGPT and prints the suggested lyrics.

Usage (from the directory that contains config/.env):

    python lyric_buddy.py

config/.env must define SECRETS_FILE, MAX_TOKENS, TEMPERATURE and MODEL.
SECRETS_FILE is a SOPS-encrypted JSON file containing an api_key field.
"""

import logging
import sys
from enum import Enum
from typing import Callable, Optional

from chatgpt_client import ChatGPTClient
from lyric_config import load_config
from sops_secrets import SopsSecretResolver

logger = logging.getLogger(__name__)

IDEA_PROMPT = "Enter a lyric idea prompt: "
STYLE_PROMPT = "Describe the song's style, tempo, mood, etc.: "
CONTINUE_PROMPT = "Would you like to enter another prompt? (yes/y or no/n): "
INVALID_CHOICE_MESSAGE = "Invalid response. Please enter 'yes', 'y', 'no', or 'n'."
GOODBYE_MESSAGE = "Goodbye!"

YES_ANSWERS = {'yes', 'y'}
NO_ANSWERS = {'no', 'n'}


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def compose_prompt(main_idea: str, song_details: str) -> str:
    return f"Main idea: {main_idea}\nStyle details: {song_details}"


class SessionState(Enum):
    PROMPTING = "prompting"
    CONTINUE_QUERY = "continue_query"
    FINISHED = "finished"


class LyricBuddySession:
    """Drives the prompt -> reply -> continue? loop for one console session."""

    def __init__(
        self,
        chat_client: ChatGPTClient,
        input_func: Optional[Callable[[str], str]] = None,
        output_func: Optional[Callable[..., None]] = None,
    ):
        """
        Initialize the session.

        Args:
            chat_client: Anything with a complete(prompt) -> str method
            input_func: Reads one line of user input, given a prompt
            output_func: Writes one line to the console
        """
        self.chat_client = chat_client
        self.input_func = input_func or input
        self.output_func = output_func or print
        self.state = SessionState.PROMPTING
        self.turns = 0

    def _prompt_turn(self) -> SessionState:
        main_idea = self.input_func(IDEA_PROMPT)
        song_details = self.input_func(STYLE_PROMPT)

        reply = self.chat_client.complete(compose_prompt(main_idea, song_details))
        self.output_func(f"AI Response: {reply}")
        self.turns += 1

        return SessionState.CONTINUE_QUERY

    def _continue_query(self) -> SessionState:
        choice = self.input_func(CONTINUE_PROMPT).strip().lower()

        if choice in NO_ANSWERS:
            self.output_func(GOODBYE_MESSAGE)
            return SessionState.FINISHED
        if choice in YES_ANSWERS:
            return SessionState.PROMPTING

        self.output_func(INVALID_CHOICE_MESSAGE)
        return SessionState.CONTINUE_QUERY

    def step(self) -> SessionState:
        """Run one state transition and return the new state."""
        try:
            if self.state is SessionState.PROMPTING:
                self.state = self._prompt_turn()
            elif self.state is SessionState.CONTINUE_QUERY:
                self.state = self._continue_query()
        except (EOFError, KeyboardInterrupt):
            # Console closed or Ctrl-C at a prompt
            self.output_func("")
            self.output_func(GOODBYE_MESSAGE)
            self.state = SessionState.FINISHED

        return self.state

    def run(self) -> int:
        """Loop until the user says no; returns the number of completed turns."""
        while self.state is not SessionState.FINISHED:
            self.step()
        logger.info("Session finished after %d turn(s)", self.turns)
        return self.turns


def main() -> int:
    """Command-line entry point; returns the process exit code."""
    setup_logging()

    try:
        config = load_config()
        api_key = SopsSecretResolver().get_api_key(config.secrets_file)

        client = ChatGPTClient(
            api_key=api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        try:
            LyricBuddySession(client).run()
        finally:
            client.close()
    except KeyboardInterrupt:
        print("Error: Interrupted", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
