# Routes package __init__.py - re-exports routers for main.py convenience
from .accounts import router as accounts_router
from .initial_data import router as initial_data_router
from .folders import router as folders_router
from .decks import router as decks_router
from .flashcards import router as flashcards_router

__all__ = ['accounts_router', 'initial_data_router', 'folders_router', 'decks_router', 'flashcards_router']
