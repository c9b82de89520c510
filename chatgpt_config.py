# chatgpt_config.py
"""
ChatGPT API settings that don't come from config/.env.
The API key is never stored here; it is decrypted from the SOPS secrets file at startup.
"""

SONGWRITING_SYSTEM_PROMPT = (
    "You're my songwriting partner! I'm going to send you ideas, lyrics, or song concepts. "
    "Please help me turn these scraps into lyric ideas. Thanks!"
)

# ChatGPT API Configuration
CHATGPT_CONFIG = {
    'base_url': 'https://api.openai.com/v1',  # OpenAI API endpoint
    'system_prompt': SONGWRITING_SYSTEM_PROMPT,  # Persona sent ahead of every prompt
    'timeout': None  # Request timeout in seconds (None waits indefinitely)
}
