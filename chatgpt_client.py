"""
ChatGPT client for Lyric Buddy
Sends one songwriting prompt per call to the OpenAI chat completions API
and pulls the assistant's reply out of the response.
"""

import logging
from typing import Any, Dict, Optional

import requests

from chatgpt_config import CHATGPT_CONFIG
from lyric_errors import ChatResponseError, ChatTransportError

logger = logging.getLogger(__name__)


class ChatGPTClient:
    """Thin wrapper around POST /chat/completions with a bearer token."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int,
        temperature: float,
        session: Optional[requests.Session] = None,
        base_url: str = CHATGPT_CONFIG['base_url'],
        timeout: Optional[float] = CHATGPT_CONFIG['timeout'],
        system_prompt: str = CHATGPT_CONFIG['system_prompt'],
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.system_prompt = system_prompt

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {api_key}',
            'Content-Type': 'application/json'
        })

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        """Build the request body: the songwriting persona followed by the user's prompt."""
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": self.system_prompt
                },
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature
        }

    def send(self, prompt: str) -> Dict[str, Any]:
        """
        POST a prompt and return the parsed JSON body.

        HTTP error statuses are logged but the body is parsed regardless;
        only transport failures and non-JSON bodies raise.
        """
        logger.info("Sending prompt to OpenAI: %s", prompt)
        payload = self.build_payload(prompt)

        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ChatTransportError(f"ChatGPT request failed: {e}")

        logger.info("Received response: %s", response.text)

        if response.status_code != 200:
            logger.warning("ChatGPT API returned status %s", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ChatResponseError(f"Failed to parse AI response JSON: {e}")

    @staticmethod
    def extract_reply(response_json: Any) -> str:
        """Return choices[0].message.content, or '' when the response doesn't have that shape."""
        try:
            content = response_json['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            logger.warning("ChatGPT response has no choices[0].message.content; returning empty reply")
            return ""

        if content is None:
            return ""
        return content if isinstance(content, str) else str(content)

    def complete(self, prompt: str) -> str:
        return self.extract_reply(self.send(prompt))

    def close(self):
        self.session.close()
