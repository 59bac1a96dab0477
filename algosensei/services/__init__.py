"""
Business Logic Services

Includes:
- UserRepository: Registration and credential checks
- ChatRepository: Owner-scoped chat CRUD
- CompletionRelay: Streaming tutor replies from the LLM provider
- MemoryService: Best-effort long-term learner memory

Import services directly from their modules; importing the relay pulls in
LiteLLM, which the repositories do not need.
"""
