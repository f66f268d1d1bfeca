# src/feeds.py
"""RSS sources grouped by language. Hardcoded for now, easy to swap later."""

RSS_SOURCES = {
    "english": {
        "techcrunch": "https://techcrunch.com/feed/",
        "bbc_tech": "https://feeds.bbci.co.uk/news/technology/rss.xml",
        "hacker_news": "https://hnrss.org/frontpage",
        "wired": "https://www.wired.com/feed/rss",
        "ars_technica": "https://feeds.arstechnica.com/arstechnica/index",
        "engadget": "https://www.engadget.com/rss.xml",
        "verge": "https://www.theverge.com/rss/index.xml",
        "zdnet": "https://www.zdnet.com/news/rss.xml",
    },
    "bengali": {
        "prothom_alo": "https://www.prothomalo.com/feed/",
        "kaler_kantho": "https://www.kalerkantho.com/rss.xml",
        "zeenews_bengali": "https://zeenews.india.com/bengali/rss.xml",
        "abp_live_home": "https://bengali.abplive.com/home/feed",
    },
    "hindi": {
        "amar_ujala_breaking": "https://www.amarujala.com/rss/breaking-news.xml",
        "bbc_hindi": "https://feeds.bbci.co.uk/hindi/rss.xml",
        "abp_live_hindi": "https://www.abplive.com/home/feed",
    },
}


def all_feed_urls(sources: dict[str, dict[str, str]] | None = None) -> list[str]:
    """Flatten every language group into one ordered list of feed URLs."""
    sources = RSS_SOURCES if sources is None else sources
    return [url for group in sources.values() for url in group.values()]
