# builder_chat/providers/tier3_fallback.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Tier3 Template Fallback
---------------------------------------------
Fully offline, deterministic reply used when no model could answer.

- Never touches the network.
- Same input, same output.
- Echoes the user's request and sketches a generic architecture so the
  conversation can carry on while the models are unreachable.
"""

from __future__ import annotations

EMPTY_REPLY_PLACEHOLDER = "Sorry, I couldn't generate a response."

FALLBACK_TEMPLATE = """[Offline response - AI inference is currently unavailable]

Based on your request: "{user_text}"

Here's a suggested architecture for your Cloudflare Workers application:

**Architecture:**
- Cloudflare Workers for serverless compute
- Workers AI with Llama 3.3 for LLM inference
- Durable Objects for state management
- Static Assets for serving the UI

**File Structure:**
```
my-app/
├── src/
│   └── index.ts (Worker entry point)
├── public/
│   └── index.html (Frontend UI)
└── wrangler.jsonc (Configuration)
```

**Next Steps:**
1. Define your data models
2. Implement the Worker API routes
3. Create the Durable Object for state
4. Build the frontend interface

Real AI responses will return once an inference provider is reachable again."""


def build_fallback_reply(user_text: str) -> str:
    """Return the offline template reply for `user_text`."""
    return FALLBACK_TEMPLATE.format(user_text=user_text)
