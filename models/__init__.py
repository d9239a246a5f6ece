from .user import UserCredentials, UserPublic, LoginResponse
from .folder import Folder, FolderCreate
from .deck import Deck, DeckCreate
from .flashcard import FlashcardCreate, FlashcardUpdate

__all__ = ['UserCredentials', 'UserPublic', 'LoginResponse', 'Folder', 'FolderCreate', 'Deck', 'DeckCreate', 'FlashcardCreate', 'FlashcardUpdate']
