"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send a system + user instruction pair to the chat-completion endpoint.
- Recover the JSON array embedded in the model's free-form reply.
- Surface call and parse failures as ``LLMError`` so callers can fail fast.
"""
