# SQL schema for MedRecall database

SCHEMA_VERSION = 3

SCHEMA_SQL = """
-- Users
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    subscription_status TEXT NOT NULL DEFAULT 'inactive',
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Folders
CREATE TABLE IF NOT EXISTS folders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'flashcards' CHECK(type IN ('flashcards', 'questions')),
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    deleted_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

-- Decks (folder_id NULL means unfiled)
CREATE TABLE IF NOT EXISTS decks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    folder_id INTEGER,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    deleted_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (folder_id) REFERENCES folders (id) ON DELETE SET NULL
);

-- Flashcards (options holds JSON text)
CREATE TABLE IF NOT EXISTS flashcards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    deck_id INTEGER NOT NULL,
    front TEXT NOT NULL DEFAULT '',
    back TEXT NOT NULL DEFAULT '',
    commentary TEXT NOT NULL DEFAULT '',
    type TEXT NOT NULL DEFAULT 'text',
    options TEXT,
    image_url TEXT,
    answer_image_url TEXT,
    srs_level INTEGER NOT NULL DEFAULT 0,
    next_review_date TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT,
    deleted_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (deck_id) REFERENCES decks (id) ON DELETE CASCADE
);

-- Planners
CREATE TABLE IF NOT EXISTS planners (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    title TEXT,
    content TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    deleted_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

-- Files (metadata only)
CREATE TABLE IF NOT EXISTS files (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    folder_id INTEGER,
    name TEXT,
    url TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    deleted_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);
"""

# Indexes for the owner/soft-delete predicates every query carries
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_folders_owner ON folders (user_id, deleted_at);
CREATE INDEX IF NOT EXISTS idx_decks_owner ON decks (user_id, deleted_at);
CREATE INDEX IF NOT EXISTS idx_decks_folder ON decks (folder_id);
CREATE INDEX IF NOT EXISTS idx_flashcards_owner ON flashcards (user_id, deleted_at);
CREATE INDEX IF NOT EXISTS idx_flashcards_deck ON flashcards (deck_id);
CREATE INDEX IF NOT EXISTS idx_planners_owner ON planners (user_id, deleted_at);
CREATE INDEX IF NOT EXISTS idx_files_owner ON files (user_id, deleted_at);
"""

OWNED_TABLES = ("folders", "decks", "flashcards", "planners", "files")
