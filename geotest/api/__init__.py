from .api import create_app, stream_events

__all__ = ['create_app', 'stream_events']
