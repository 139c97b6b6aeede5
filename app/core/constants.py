"""Table names, validation limits and other fixed values."""

# Supabase tables
PROFILES_TABLE = "profiles"
COMMENTS_TABLE = "comments"
BOOKMARKS_TABLE = "bookmarks"

# Columns selected for comment reads and inserts
COMMENT_COLUMNS = (
    "id, user_id, manga_id, chapter_hid, content, parent_id, created_at, updated_at"
)

# Author display fallback
ANONYMOUS_USERNAME = "Anonymous"

# Comments
COMMENT_MIN_LENGTH = 1
COMMENT_MAX_LENGTH = 1000

# Profiles
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"
BIO_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 8

# Bookmarks
BOOKMARK_CONFLICT_COLUMNS = "user_id,manga_id"
BOOKMARK_SORT_COLUMNS = frozenset(
    {"updated_at", "created_at", "manga_title", "last_read_at"}
)
BOOKMARK_DEFAULT_LIMIT = 20
BOOKMARK_MAX_LIMIT = 100
MANGA_STATUS_MIN = 0
MANGA_STATUS_MAX = 4
DEFAULT_MANGA_STATUS = 1
DEFAULT_MANGA_COUNTRY = "jp"
