from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    ALL = "Lahat"
    BREAKING = "Nagbabagang Balita"
    POLITICS = "Pulitika"
    ECONOMY = "Ekonomiya"
    SPORTS = "Isports"
    ENTERTAINMENT = "Showbiz"
    TECHNOLOGY = "Teknolohiya"
    GLOBAL = "Global"

    @classmethod
    def parse(cls, value: "str | Category | None") -> "Category":
        """Accept the display label ("Pulitika") or the name ("POLITICS", "Politics")."""
        if isinstance(value, Category):
            return value
        raw = (value or "").strip()
        if not raw:
            return cls.ALL
        for member in cls:
            if raw == member.value or raw.upper() == member.name:
                return member
        lowered = raw.lower()
        for member in cls:
            if lowered == member.value.lower():
                return member
        raise ValueError(f"unknown category: {value!r}")


# Display order; also the tie-break order between equally scored categories.
CATEGORIES = [
    Category.ALL,
    Category.BREAKING,
    Category.POLITICS,
    Category.ECONOMY,
    Category.SPORTS,
    Category.ENTERTAINMENT,
    Category.TECHNOLOGY,
    Category.GLOBAL,
]

RSS_FEEDS = {  # publisher label -> upstream RSS URL
    "GMA": "https://data.gmanetwork.com/gno/rss/news/feed.xml",
    "INQUIRER": "https://newsinfo.inquirer.net/feed",
    "PHILSTAR": "https://www.philstar.com/rss/headlines",
    "RAPPLER": "https://www.rappler.com/feed/",
    "NEWS5": "https://www.interaksyon.com/feed/",
    "MANILA TIMES": "https://www.manilatimes.net/news/feed",
    "DAILY TRIBUNE": "https://tribune.net.ph/feed/",
    "BUSINESSWORLD": "https://www.bworldonline.com/feed/",
}

PUBLISHER_HOME_PAGES = {  # used when an item link is missing or broken
    "GMA News": "https://www.gmanetwork.com/news/",
    "GMA": "https://www.gmanetwork.com/news/",
    "Inquirer": "https://newsinfo.inquirer.net",
    "INQUIRER": "https://newsinfo.inquirer.net",
    "PhilStar": "https://www.philstar.com",
    "Philstar.com": "https://www.philstar.com",
    "PHILSTAR": "https://www.philstar.com",
    "Manila Bulletin": "https://mb.com.ph",
    "Rappler": "https://www.rappler.com",
    "RAPPLER": "https://www.rappler.com",
    "NEWS5": "https://www.interaksyon.com",
    "MANILA TIMES": "https://www.manilatimes.net",
    "DAILY TRIBUNE": "https://tribune.net.ph",
    "BUSINESSWORLD": "https://www.bworldonline.com",
}

GENERIC_FALLBACK_URL = "https://www.google.com"

WEIGHTED_KEYWORDS: dict[Category, dict] = {
    Category.BREAKING: {
        "weight": 10,
        "keywords": [
            "phivolcs", "pagasa", "lindol", "earthquake", "magnitude", "bulkan", "volcano", "bagyo",
            "storm", "lpa", "signal", "alert", "breaking", "nagbabaga", "flash", "urgent",
        ],
    },
    Category.GLOBAL: {
        "weight": 9,
        "keywords": [
            "trump", "biden", "harris", "putin", "xi jinping", "ukraine", "israel", "gaza", "russia",
            "china", "usa", "america", "un", "nato", "international", "world",
        ],
    },
    Category.POLITICS: {
        "weight": 8,
        "keywords": [
            "pbbm", "marcos", "senado", "senate", "kongreso", "congress", "vp", "duterte", "election",
            "batas", "law", "bill", "halalan", "comelec", "malacañang",
        ],
    },
    Category.TECHNOLOGY: {
        "weight": 7,
        "keywords": [
            "gadget", "smartphone", "ai", "apps", "internet", "cybersecurity", "startup", "tech",
            "software", "hardware", "innovation", "robot", "computer",
        ],
    },
    Category.ENTERTAINMENT: {
        "weight": 5,
        "keywords": [
            "actor", "actress", "celebrity", "concert", "pelikula", "movie", "k-pop", "viral",
            "trending", "showbiz", "star", "drama", "kapuso", "kapamilya",
        ],
    },
    Category.ECONOMY: {
        "weight": 6,
        "keywords": [
            "inflation", "price", "market", "stock", "peso", "dollar", "dbm", "dof", "neda", "bsp",
            "tax", "business",
        ],
    },
    Category.SPORTS: {
        "weight": 6,
        "keywords": [
            "nba", "pba", "basketball", "volleyball", "boxing", "mpl", "game", "score", "tournament",
            "championship",
        ],
    },
}

SERIOUS_TOPIC_KEYWORDS = [  # government/economy headlines
    "pbbm", "marcos", "economy", "inflation", "digitalization", "government", "dof", "neda",
    "pulitika", "ekonomiya", "monetary",
]

MISMATCH_PATH_HINTS = [  # lifestyle sections that should never carry those headlines
    "/weather/", "/sports/", "/lifestyle/", "/entertainment/", "/showbiz/", "/isports/", "/celebrity/",
]

TRACKER_IMAGE_HINTS = ("feedburner", "doubleclick")

MIN_DESCRIPTION_CHARS = 20
RAW_SUMMARY_MAX_CHARS = 500
FILIPINO_PLACEHOLDER = "Isinasalin..."
DISPLAY_DATE_FALLBACK = "Kasalukuyan"

RSS_CHANNEL_TITLE = "Daily Taho News Feed"
RSS_CHANNEL_DESCRIPTION = "Latest headlines from top Philippine news sources, curated by Daily Taho."
RSS_DESCRIPTION_MAX_CHARS = 500

FEED_CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=60"
