"""
Static TMDB lookup tables used when creating Language and Genre rows
"""
from types import MappingProxyType

LANGUAGE_NAMES = MappingProxyType({
    "en": "English", "ja": "Japanese", "ko": "Korean", "zh": "Chinese",
    "es": "Spanish", "fr": "French", "de": "German", "it": "Italian",
    "pt": "Portuguese", "ru": "Russian", "hi": "Hindi", "th": "Thai",
    "id": "Indonesian", "tr": "Turkish", "ar": "Arabic", "pl": "Polish",
    "nl": "Dutch", "sv": "Swedish", "no": "Norwegian", "da": "Danish",
    "fi": "Finnish", "cs": "Czech", "hu": "Hungarian", "ro": "Romanian",
})

# TMDB movie genre ids (GET /genre/movie/list)
GENRE_NAMES = MappingProxyType({
    28: "Action", 12: "Adventure", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 14: "Fantasy", 36: "History",
    27: "Horror", 10402: "Music", 9648: "Mystery", 10749: "Romance", 878: "Science Fiction",
    10770: "TV Movie", 53: "Thriller", 10752: "War", 37: "Western",
})


def get_language_name(code: str) -> str:
    """Display name for an ISO 639-1 code; unknown codes are returned as-is"""
    return LANGUAGE_NAMES.get(code, code)


def get_genre_name(genre_id: int) -> str:
    """Display name for a TMDB genre id, 'Genre <id>' when unknown"""
    return GENRE_NAMES.get(genre_id, f"Genre {genre_id}")
