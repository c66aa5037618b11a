"""NiceGUI interface - thin presentation layer for the chat.

Responsibilities:
    - Transcript display with live token updates
    - Reasoning layers, pinning, new chat
    - Send and stop controls bound to the stream state

Delegates all request handling to studio_chat.chat.
"""
