"""Core domain package for spamguard.

Core contains the prompt, verdict parsing, threshold policy and moderation
logic without any Telegram or HTTP-specific code, keeping the business logic
portable.
"""
