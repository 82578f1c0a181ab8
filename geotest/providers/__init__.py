"""
Scoring providers
"""
from .base import VendorAdapter, HttpCall
from .openai import OpenAIAdapter
from .gemini import GeminiAdapter
from .claude import ClaudeAdapter
from .client import ProviderClient, build_provider_clients

__all__ = [
    'VendorAdapter',
    'HttpCall',
    'OpenAIAdapter',
    'GeminiAdapter',
    'ClaudeAdapter',
    'ProviderClient',
    'build_provider_clients',
]
